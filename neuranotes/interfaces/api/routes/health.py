"""
Health Routes - Liveness, readiness and API info.
"""

from typing import Any

from fastapi import APIRouter, Depends

from neuranotes import __version__
from neuranotes.adapters.faiss import FAISSIndex
from neuranotes.adapters.sqlite import SQLiteRepository
from neuranotes.domains.search import HybridSearchEngine
from neuranotes.interfaces.api.deps import (
    get_search_engine,
    get_sqlite_repository,
    get_vector_index,
)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "healthy", "service": "neuranotes"}


@router.get("/health/ready")
async def readiness(
    repo: SQLiteRepository = Depends(get_sqlite_repository),
    index: FAISSIndex = Depends(get_vector_index),
    engine: HybridSearchEngine = Depends(get_search_engine),
) -> dict[str, Any]:
    """
    Report which search tiers can answer.

    A text store failure propagates as StorageError.
    """
    passages = await repo.get_passage_count()
    vectors = index.size
    hybrid = engine.embedding_configured and vectors > 0
    return {
        "status": "ready",
        "passages": passages,
        "vectors": vectors,
        "embedding_configured": engine.embedding_configured,
        "mode": "hybrid" if hybrid else "keyword",
    }


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "NeuraNotes API",
        "version": __version__,
        "description": "Hybrid lexical + vector passage search",
        "endpoints": ["/api/hybrid-search", "/health", "/health/ready"],
        "docs": "/docs",
    }
