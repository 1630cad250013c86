"""
Embedding Adapters - Embedding Service implementations and provider selection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from neuranotes.domains.search.embedding import UnconfiguredEmbeddingService

from .openai_service import OpenAIEmbeddingService

if TYPE_CHECKING:
    from neuranotes.config import Settings
    from neuranotes.domains.search.contracts import EmbeddingService

logger = logging.getLogger(__name__)

__all__ = ["OpenAIEmbeddingService", "create_embedding_service"]


def create_embedding_service(settings: Settings) -> EmbeddingService:
    """
    Select the embedding provider from settings.

    A missing credential or provider yields the unconfigured service, which
    makes every search take the keyword-only path.
    """
    provider = settings.embedding_provider.lower()

    if provider == "openai":
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY not set, vector search disabled")
            return UnconfiguredEmbeddingService("OpenAI API key not configured")
        return OpenAIEmbeddingService(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            base_url=settings.openai_base_url,
            timeout=settings.embedding_timeout_seconds,
        )

    if provider == "local":
        from .local import SentenceTransformerEmbeddingService

        return SentenceTransformerEmbeddingService(settings.local_embedding_model)

    if provider != "none":
        logger.warning("Unknown embedding provider %r, vector search disabled", provider)
    return UnconfiguredEmbeddingService(f"Embedding provider {provider!r} not available")
