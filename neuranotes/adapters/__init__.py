"""
Adapters - External service integrations.

All store and embedding calls are wrapped here to isolate the search domain
from third-party changes.
"""

from .embeddings import OpenAIEmbeddingService, create_embedding_service
from .faiss import FAISSIndex
from .sqlite import SQLiteRepository

__all__ = [
    "SQLiteRepository",
    "FAISSIndex",
    "OpenAIEmbeddingService",
    "create_embedding_service",
]
