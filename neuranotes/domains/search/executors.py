"""
Search Executors - Lexical, vector and direct-document passage lookup.

Each executor absorbs failures of its store and reports them as zero
results, so the cascade never distinguishes "store down" from "no match".
Cancellation is never absorbed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .models import PassageMatch

if TYPE_CHECKING:
    from .contracts import ContentExtractor, DocumentDirectory, TextStore, VectorStore

logger = logging.getLogger(__name__)

__all__ = [
    "LexicalSearchExecutor",
    "VectorSearchExecutor",
    "DocumentFallbackExecutor",
    "DEFAULT_SIMILARITY_THRESHOLD",
]

DEFAULT_SIMILARITY_THRESHOLD = 0.5


class LexicalSearchExecutor:
    """Full-text passage search; store order becomes lexical_rank."""

    def __init__(self, text_store: TextStore) -> None:
        self._store = text_store

    async def search(
        self,
        text: str,
        scope_document_id: str | None = None,
        limit: int = 20,
    ) -> list[PassageMatch]:
        try:
            rows = await self._store.lexical_search(text, scope_document_id, limit)
        except Exception:
            logger.warning("Lexical search failed, treating as no results", exc_info=True)
            return []

        matches: list[PassageMatch] = []
        for row in rows or []:
            try:
                passage_id, document_id = str(row["id"]), str(row["document_id"])
                passage_text = str(row.get("text") or "")
            except (KeyError, TypeError, AttributeError):
                logger.warning("Skipping malformed lexical row: %r", row)
                continue
            # Scope is re-checked in case the store ignores it
            if scope_document_id and document_id != scope_document_id:
                continue
            matches.append(
                PassageMatch(
                    id=passage_id,
                    document_id=document_id,
                    text=passage_text,
                    lexical_rank=len(matches),
                )
            )
            if len(matches) >= limit:
                break

        logger.debug("Lexical search: %d matches", len(matches))
        return matches


class VectorSearchExecutor:
    """
    Embedding similarity search.

    Args:
        vector_store: Store answering similarity queries
        similarity_threshold: Minimum cosine similarity (lower it to ~0.1
            when stored vectors are low-fidelity)
    """

    def __init__(
        self,
        vector_store: VectorStore,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        self._store = vector_store
        self.similarity_threshold = similarity_threshold

    async def search(
        self,
        vector: list[float],
        scope_document_id: str | None = None,
        limit: int = 20,
        threshold: float | None = None,
    ) -> list[PassageMatch]:
        threshold = self.similarity_threshold if threshold is None else threshold

        try:
            rows = await self._store.vector_search(vector, scope_document_id, limit, threshold)
        except Exception:
            logger.warning("Vector search failed, treating as no results", exc_info=True)
            return []

        scored: list[tuple[float, str, str, str]] = []
        for row in rows or []:
            try:
                similarity = float(row.get("similarity") or 0.0)
                passage_id, document_id = str(row["id"]), str(row["document_id"])
                text = str(row.get("text") or "")
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed vector row: %r", row)
                continue
            if similarity <= threshold:
                continue
            if scope_document_id and document_id != scope_document_id:
                continue
            scored.append((min(1.0, max(0.0, similarity)), passage_id, document_id, text))

        scored.sort(key=lambda item: item[0], reverse=True)

        matches = [
            PassageMatch(
                id=passage_id,
                document_id=document_id,
                text=text,
                vector_similarity=similarity,
            )
            for similarity, passage_id, document_id, text in scored[:limit]
        ]

        logger.debug("Vector search: %d matches above %.2f", len(matches), threshold)
        return matches


class DocumentFallbackExecutor:
    """
    Last-resort substring scan over whole documents.

    Matching documents come back as single passages titled by the document,
    in directory order.
    """

    def __init__(self, directory: DocumentDirectory, extractor: ContentExtractor) -> None:
        self._directory = directory
        self._extractor = extractor

    async def search(
        self,
        text: str,
        scope_document_id: str | None = None,
        limit: int = 20,
    ) -> list[PassageMatch]:
        needle = text.strip().lower()
        if not needle:
            return []

        try:
            documents = await self._directory.list_documents(scope_document_id)
        except Exception:
            logger.warning("Document listing failed, treating as no results", exc_info=True)
            return []

        matches: list[PassageMatch] = []
        for doc in documents or []:
            doc_id = str(doc["id"])
            if scope_document_id and doc_id != scope_document_id:
                continue

            title = doc.get("title") or ""
            if needle in title.lower() or needle in self._body_text(doc).lower():
                matches.append(
                    PassageMatch(
                        id=doc_id,
                        document_id=doc_id,
                        text=title,
                        lexical_rank=len(matches),
                    )
                )
                if len(matches) >= limit:
                    break

        logger.info("Document fallback: %d documents matching %r", len(matches), text[:50])
        return matches

    def _body_text(self, doc: dict[str, Any]) -> str:
        try:
            return self._extractor.extract_plain_text(doc.get("body"))
        except Exception:
            logger.warning("Could not extract text from document %s", doc.get("id"), exc_info=True)
            return ""
