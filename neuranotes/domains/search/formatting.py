"""
Result Formatting - Display views and search-term highlighting.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import PREVIEW_LENGTH, DisplayResult, FusedResult

__all__ = ["format_results", "highlight_terms", "make_preview"]


def make_preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Truncate text for list display."""
    if len(text) > length:
        return text[:length] + "..."
    return text


def format_results(results: Iterable[FusedResult]) -> list[DisplayResult]:
    """Convert fused results into display rows."""
    return [
        DisplayResult(
            id=result.id,
            document_id=result.document_id,
            text=result.text,
            score=result.hybrid_score,
            lexical_score=result.lexical_score,
            vector_score=result.vector_score,
            preview=make_preview(result.text or ""),
        )
        for result in results
    ]


def highlight_terms(text: str | None, query: str | None) -> str | None:
    """
    Wrap query terms in <mark> tags.

    Terms of two characters or fewer are ignored; matching is
    case-insensitive and keeps the original casing of the text.
    """
    if not text or not query:
        return text

    terms = {term for term in query.lower().split() if len(term) > 2}
    if not terms:
        return text

    # Single alternation, longest terms first
    pattern = "|".join(re.escape(term) for term in sorted(terms, key=len, reverse=True))
    return re.sub(f"({pattern})", r"<mark>\1</mark>", text, flags=re.IGNORECASE)
