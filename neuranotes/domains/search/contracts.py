"""
Search Contracts - Interfaces for the collaborators of the search domain.

Stores return plain rows; executors own the conversion to PassageMatch.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .models import Query, SearchOutcome


@runtime_checkable
class EmbeddingService(Protocol):
    """Contract for query embedding providers."""

    async def embed(self, text: str) -> list[float]:
        """
        Convert text to a vector.

        Raises:
            EmbeddingUnavailable: service unreachable, failing, or unconfigured
        """
        ...


@runtime_checkable
class TextStore(Protocol):
    """Contract for ranked full-text passage lookup."""

    async def lexical_search(
        self,
        text: str,
        scope_id: str | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """Return rows with id, document_id and text, best match first."""
        ...


@runtime_checkable
class VectorStore(Protocol):
    """Contract for embedding similarity lookup."""

    async def vector_search(
        self,
        vector: list[float],
        scope_id: str | None = None,
        limit: int = 20,
        threshold: float = 0.5,
    ) -> list[dict[str, Any]]:
        """Return rows with id, document_id, text and similarity."""
        ...


@runtime_checkable
class ContentExtractor(Protocol):
    """Contract for flattening a structured document body."""

    def extract_plain_text(self, body: Any) -> str:
        ...


@runtime_checkable
class DocumentDirectory(Protocol):
    """Contract for listing whole documents."""

    async def list_documents(self, scope_id: str | None = None) -> list[dict[str, Any]]:
        """Return rows with id, title and body."""
        ...


@runtime_checkable
class SearchEngine(Protocol):
    """Contract for search implementations."""

    async def search(self, query: Query) -> SearchOutcome:
        """Execute search and return the outcome."""
        ...
