"""
Embedding Client - Query text to vector, with a typed "unconfigured" path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from neuranotes.config.errors import EmbeddingUnavailable, SearchError

if TYPE_CHECKING:
    from .contracts import EmbeddingService

logger = logging.getLogger(__name__)

__all__ = ["EmbeddingClient", "UnconfiguredEmbeddingService"]


class UnconfiguredEmbeddingService:
    """Stand-in service used when no embedding provider is configured."""

    def __init__(self, reason: str = "Embedding service is not configured") -> None:
        self.reason = reason

    async def embed(self, text: str) -> list[float]:
        raise EmbeddingUnavailable(self.reason, {"configured": False})


class EmbeddingClient:
    """
    Wraps an injected embedding service.

    Every failure of the underlying service surfaces as EmbeddingUnavailable
    so the search cascade has a single recoverable error to handle.

    Example:
        >>> client = EmbeddingClient(OpenAIEmbeddingService(api_key="sk-..."))
        >>> vector = await client.embed("artificial intelligence")
    """

    def __init__(self, service: EmbeddingService) -> None:
        self._service = service

    @property
    def configured(self) -> bool:
        """False when backed by the unconfigured stand-in."""
        return not isinstance(self._service, UnconfiguredEmbeddingService)

    async def embed(self, text: str) -> list[float]:
        """
        Embed query text.

        Args:
            text: Non-empty query text (trimmed before sending)

        Returns:
            Embedding vector

        Raises:
            SearchError: text is empty after trimming
            EmbeddingUnavailable: the service could not produce a vector
        """
        cleaned = text.strip()
        if not cleaned:
            raise SearchError("Cannot embed empty text")

        try:
            vector = await self._service.embed(cleaned)
        except EmbeddingUnavailable:
            raise
        except Exception as e:
            raise EmbeddingUnavailable(
                f"Embedding service failed: {e}",
                {"error_type": type(e).__name__},
            ) from e

        if vector is None or len(vector) == 0:
            raise EmbeddingUnavailable("Embedding service returned an empty vector")

        return [float(v) for v in vector]

    async def aclose(self) -> None:
        """Release the underlying service's resources, if it holds any."""
        close = getattr(self._service, "aclose", None)
        if close is not None:
            await close()
