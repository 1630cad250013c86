"""
FAISS Index - Passage embedding similarity search.

Features:
- Async-compatible operations
- Cosine similarity via inner product over L2-normalized vectors
- Per-document scoping by metadata filter
- Index persistence
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import faiss
import numpy as np

logger = logging.getLogger(__name__)

__all__ = ["FAISSIndex", "INDEX_FILE", "METADATA_FILE"]

INDEX_FILE = "faiss_index.bin"
METADATA_FILE = "passages.json"


class FAISSIndex:
    """
    FAISS vector index acting as the Vector Store.

    Each vector carries a metadata row with the passage id, document_id
    and text.

    Example:
        >>> index = FAISSIndex(dimension=384)
        >>> await index.add_vectors(embeddings, [{"id": "p1", "document_id": "d1", "text": "..."}])
        >>> rows = await index.vector_search(query_embedding, limit=10, threshold=0.5)
    """

    def __init__(
        self,
        dimension: int = 384,
        index_type: str = "Flat",
    ) -> None:
        """
        Initialize FAISS index.

        Args:
            dimension: Vector dimension (384 for MiniLM, 3072 for text-embedding-3-large)
            index_type: Index type ("Flat" or "HNSW")
        """
        self.dimension = dimension
        self.index_type = index_type

        self._index: faiss.Index | None = None
        self._metadata: list[dict[str, Any]] = []

    def _create_index(self) -> faiss.Index:
        """Create FAISS index based on type."""
        if self.index_type == "HNSW":
            return faiss.IndexHNSWFlat(self.dimension, 32, faiss.METRIC_INNER_PRODUCT)
        return faiss.IndexFlatIP(self.dimension)

    async def initialize(self) -> None:
        """Initialize empty index."""
        self._index = self._create_index()
        self._metadata = []
        logger.info(
            "FAISS index initialized: dimension=%d, type=%s",
            self.dimension,
            self.index_type,
        )

    async def add_vectors(
        self,
        vectors: np.ndarray,
        metadata: list[dict[str, Any]],
    ) -> None:
        """
        Add vectors with metadata.

        Args:
            vectors: numpy array of shape (n, dimension)
            metadata: Passage rows (same length as vectors)
        """
        if len(vectors) != len(metadata):
            raise ValueError("vectors and metadata must have the same length")

        if self._index is None:
            await self.initialize()
        assert self._index is not None  # Guaranteed by initialize()

        vectors = np.ascontiguousarray(np.asarray(vectors, dtype="float32"))
        if vectors.ndim == 1:
            vectors = vectors.reshape(1, -1)

        # Normalize for inner product (cosine similarity)
        faiss.normalize_L2(vectors)

        await asyncio.to_thread(self._index.add, vectors)
        self._metadata.extend(metadata)

        logger.debug("Added %d vectors to index", len(vectors))

    async def vector_search(
        self,
        vector: Sequence[float] | np.ndarray,
        scope_id: str | None = None,
        limit: int = 20,
        threshold: float = 0.5,
    ) -> list[dict[str, Any]]:
        """
        Search for passages similar to `vector`.

        Args:
            vector: Query vector of shape (dimension,)
            scope_id: Optional document ID filter
            limit: Maximum results
            threshold: Minimum cosine similarity (exclusive)

        Returns:
            Rows with id, document_id, text and similarity, most similar first
        """
        if self._index is None or self._index.ntotal == 0:
            return []

        query = np.ascontiguousarray(np.asarray(vector, dtype="float32").reshape(1, -1))
        faiss.normalize_L2(query)

        # Scoped searches scan everything, then filter by document
        k = self._index.ntotal if scope_id else min(limit, self._index.ntotal)
        scores, indices = await asyncio.to_thread(self._index.search, query, k)

        results = []
        for score, idx in zip(scores[0], indices[0]):
            if idx < 0 or idx >= len(self._metadata):
                continue
            similarity = float(score)
            if similarity <= threshold:
                continue
            meta = self._metadata[idx]
            if scope_id and meta.get("document_id") != scope_id:
                continue
            results.append(
                {
                    "id": meta.get("id"),
                    "document_id": meta.get("document_id"),
                    "text": meta.get("text", ""),
                    "similarity": min(1.0, similarity),
                }
            )
            if len(results) >= limit:
                break

        return results

    async def save(self, path: str | Path) -> None:
        """
        Write the index and its passage rows under directory `path`.

        Files: INDEX_FILE (faiss binary) and METADATA_FILE (JSON).
        """
        if self._index is None:
            await self.initialize()

        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)

        await asyncio.to_thread(faiss.write_index, self._index, str(path / INDEX_FILE))
        await asyncio.to_thread(
            _dump_json,
            path / METADATA_FILE,
            {
                "dimension": self.dimension,
                "index_type": self.index_type,
                "passages": self._metadata,
            },
        )

        logger.info("Index saved to %s (%d vectors)", path, self.size)

    async def load(self, path: str | Path) -> None:
        """
        Load an index written by `save`.

        Raises:
            FileNotFoundError: either file is missing
            ValueError: vector count and passage rows disagree
        """
        path = Path(path)
        if not self.exists(path):
            raise FileNotFoundError(f"No saved index in {path}")

        index = await asyncio.to_thread(faiss.read_index, str(path / INDEX_FILE))
        data = await asyncio.to_thread(_load_json, path / METADATA_FILE)
        passages = data.get("passages", [])

        if index.ntotal != len(passages):
            raise ValueError(
                f"Index at {path} holds {index.ntotal} vectors "
                f"but {len(passages)} passage rows"
            )
        if index.d != self.dimension:
            logger.warning(
                "Loaded index dimension %d differs from configured %d",
                index.d,
                self.dimension,
            )

        self._index = index
        self._metadata = passages
        self.dimension = index.d
        self.index_type = data.get("index_type", self.index_type)

        logger.info("Index loaded from %s (%d vectors)", path, self.size)

    @staticmethod
    def exists(path: str | Path) -> bool:
        """True when `path` holds a saved index."""
        path = Path(path)
        return (path / INDEX_FILE).exists() and (path / METADATA_FILE).exists()

    @property
    def size(self) -> int:
        """Number of vectors in the index."""
        return self._index.ntotal if self._index is not None else 0


def _dump_json(path: Path, data: dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)


def _load_json(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data: dict[str, Any] = json.load(f)
    return data
