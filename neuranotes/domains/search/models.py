"""
Search Models - Data types for the hybrid retrieval domain.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

MAX_QUERY_LENGTH = 1000
PREVIEW_LENGTH = 200


class SearchMethod(str, Enum):
    """Which tier of the fallback cascade produced an outcome."""

    FUSED = "fused"
    LEXICAL_FALLBACK = "lexical-fallback"
    DOCUMENT_FALLBACK = "document-fallback"
    NO_RESULTS = "no-results"
    ERROR = "error"


class Query(BaseModel):
    """
    Immutable search request.

    Empty text is allowed and short-circuits to a "no-results" outcome;
    oversized text fails validation.
    """

    text: str = Field(default="", max_length=MAX_QUERY_LENGTH)
    scope_document_id: str | None = None
    limit: int = Field(default=10, ge=1)
    lexical_weight: float = 0.5
    vector_weight: float = 0.5

    model_config = {"frozen": True}

    @property
    def normalized_text(self) -> str:
        """Query text with surrounding whitespace removed."""
        return self.text.strip()

    @property
    def is_empty(self) -> bool:
        return not self.normalized_text


class SearchOptions(BaseModel):
    """Caller-facing options for a single search."""

    document_id: str | None = None
    limit: int | None = Field(default=None, ge=1)
    lexical_weight: float | None = None
    vector_weight: float | None = None


class PassageMatch(BaseModel):
    """Executor output before fusion."""

    id: str
    document_id: str
    text: str
    lexical_rank: int | None = None
    vector_similarity: float | None = Field(default=None, ge=0.0, le=1.0)


class FusedResult(BaseModel):
    """Single ranked passage with its component and hybrid scores."""

    id: str
    document_id: str
    text: str
    lexical_score: float = 0.0
    vector_score: float = 0.0
    hybrid_score: float = 0.0


class SearchOutcome(BaseModel):
    """Result of one completed search attempt."""

    success: bool
    query: str = ""
    results: list[FusedResult] = Field(default_factory=list)
    total: int = 0
    method: SearchMethod
    duration_ms: float = 0.0
    error: str | None = None


class DisplayResult(BaseModel):
    """Presentation view of a fused result."""

    id: str
    document_id: str
    text: str
    score: float
    lexical_score: float
    vector_score: float
    preview: str


class SessionState(BaseModel):
    """Snapshot published by a search session."""

    is_searching: bool = False
    query: str = ""
    results: list[FusedResult] = Field(default_factory=list)
    error: str | None = None
    total: int = 0
    method: SearchMethod | None = None
    duration_ms: float = 0.0

    model_config = {"frozen": True}
