"""
Local Embedding Service - sentence-transformers model run off the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from sentence_transformers import SentenceTransformer

from neuranotes.config.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)

__all__ = ["SentenceTransformerEmbeddingService"]


class SentenceTransformerEmbeddingService:
    """Embeds queries with a locally loaded sentence-transformers model."""

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", device: str = "cpu") -> None:
        self.model_name = model_name
        self.device = device
        self._model: Any = None
        self._lock = asyncio.Lock()

    async def _get_model(self) -> Any:
        async with self._lock:
            if self._model is None:
                try:
                    self._model = await asyncio.to_thread(
                        SentenceTransformer, self.model_name, device=self.device
                    )
                except Exception as e:
                    logger.warning(
                        "Failed to load %s, vector search disabled", self.model_name, exc_info=True
                    )
                    raise EmbeddingUnavailable(
                        f"Could not load embedding model {self.model_name}"
                    ) from e
        return self._model

    async def embed(self, text: str) -> list[float]:
        model = await self._get_model()
        embedding = await asyncio.to_thread(
            model.encode, text, normalize_embeddings=True, show_progress_bar=False
        )
        return [float(v) for v in embedding]
