"""
API Dependencies - Dependency injection for FastAPI routes and the CLI.

Provides singleton instances of the stores and the search engine.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from neuranotes.adapters.embeddings import create_embedding_service
from neuranotes.adapters.faiss import FAISSIndex
from neuranotes.adapters.sqlite import SQLiteRepository
from neuranotes.config import Settings, get_settings
from neuranotes.domains.search import (
    DocumentFallbackExecutor,
    EmbeddingClient,
    HybridSearchEngine,
    LexicalSearchExecutor,
    PlainTextExtractor,
    VectorSearchExecutor,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_sqlite_repository() -> SQLiteRepository:
    """Get SQLite repository singleton."""
    settings = get_settings()
    return SQLiteRepository(settings.db_path)


@lru_cache
def get_vector_index() -> FAISSIndex:
    """Get FAISS index singleton."""
    settings = get_settings()
    return FAISSIndex(dimension=settings.embedding_dimension)


def build_search_engine(
    settings: Settings,
    repo: SQLiteRepository,
    index: FAISSIndex,
) -> HybridSearchEngine:
    """Wire the search cascade from settings and store handles."""
    return HybridSearchEngine(
        embedding_client=EmbeddingClient(create_embedding_service(settings)),
        lexical=LexicalSearchExecutor(repo),
        vector=VectorSearchExecutor(index, settings.vector_similarity_threshold),
        document_fallback=DocumentFallbackExecutor(repo, PlainTextExtractor()),
        candidate_multiplier=settings.search_candidate_multiplier,
    )


@lru_cache
def get_search_engine() -> HybridSearchEngine:
    """Get hybrid search engine singleton."""
    return build_search_engine(get_settings(), get_sqlite_repository(), get_vector_index())


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    settings = get_settings()

    repo = get_sqlite_repository()
    await repo.initialize()

    index = get_vector_index()
    if FAISSIndex.exists(settings.vector_index_path):
        await index.load(settings.vector_index_path)
    else:
        logger.warning("No vector index at %s, vector search will be empty", settings.vector_index_path)
        await index.initialize()


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    if get_search_engine.cache_info().currsize:
        await get_search_engine().aclose()

    repo = get_sqlite_repository()
    await repo.close()
