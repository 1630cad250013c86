"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from neuranotes.config.errors import ErrorCode, NeuraNotesError

    raise NeuraNotesError(ErrorCode.SEARCH_INVALID_QUERY, "Query too long")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Search errors
    SEARCH_INVALID_QUERY = "SEARCH_INVALID_QUERY"
    SEARCH_FAILED = "SEARCH_FAILED"

    # Embedding service errors
    EMBEDDING_UNAVAILABLE = "EMBEDDING_UNAVAILABLE"

    # Storage errors
    STORAGE_CONNECTION_FAILED = "STORAGE_CONNECTION_FAILED"
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


class NeuraNotesError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Domain-specific exceptions for cleaner imports
class SearchError(NeuraNotesError):
    """Search orchestration errors (malformed queries, failed attempts)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_INVALID_QUERY, message, details)


class EmbeddingUnavailable(NeuraNotesError):
    """
    Embedding service is unreachable, failing, or not configured.

    Recoverable: the search cascade degrades to keyword-only search.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.EMBEDDING_UNAVAILABLE, message, details)


class StorageError(NeuraNotesError):
    """Text store or document directory errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.STORAGE_CONNECTION_FAILED,
    ) -> None:
        super().__init__(code, message, details)
