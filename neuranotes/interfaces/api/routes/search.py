"""
Search Routes - Hybrid passage search endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from neuranotes.config import Settings, get_settings
from neuranotes.config.errors import ErrorCode
from neuranotes.domains.search import (
    HybridSearchEngine,
    SearchOptions,
    SearchOutcome,
    hybrid_search,
)
from neuranotes.interfaces.api.deps import get_search_engine

router = APIRouter()


class HybridSearchRequest(BaseModel):
    """Hybrid search request body."""

    query: str = Field(..., min_length=1, max_length=1000, description="Search query")
    document_id: str | None = Field(default=None, description="Restrict to one document")
    limit: int | None = Field(default=None, ge=1, le=100, description="Defaults to search_default_limit")
    lexical_weight: float = Field(default=0.5, ge=0.0)
    vector_weight: float = Field(default=0.5, ge=0.0)


@router.post("", response_model=SearchOutcome)
async def search(
    request: HybridSearchRequest,
    engine: HybridSearchEngine = Depends(get_search_engine),
    settings: Settings = Depends(get_settings),
):
    """
    Search passages by fusing full-text and vector similarity.

    - **query**: Search query text (1-1000 chars)
    - **document_id**: Optional document scope
    - **limit**: Maximum results (1-100)
    - **lexical_weight** / **vector_weight**: Raw fusion weights

    Degraded searches (embedding or store outage) still return 200; the
    `method` field reports which fallback tier answered.
    """
    outcome = await hybrid_search(
        engine,
        request.query,
        SearchOptions(
            document_id=request.document_id,
            limit=request.limit or settings.search_default_limit,
            lexical_weight=request.lexical_weight,
            vector_weight=request.vector_weight,
        ),
    )

    if not outcome.success:
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": ErrorCode.SEARCH_FAILED.value,
                    "message": outcome.error or "Search failed",
                    "details": {},
                },
                "outcome": outcome.model_dump(mode="json"),
            },
        )

    return outcome
