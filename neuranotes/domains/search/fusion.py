"""
Score Fusion - Merge lexical and vector matches into one ranked list.

Lexical ranks and cosine similarities are not comparable raw, so lexical
rank is first mapped onto [0, 1] with a linear decay:

    lexical_score = max(0, 1 - rank / N)

and the hybrid score is the weighted sum

    hybrid_score = lexical_weight * lexical_score + vector_weight * vector_score

Linear decay is a heuristic; reciprocal-rank decay would be a drop-in
replacement for lexical_rank_score.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import FusedResult, PassageMatch

__all__ = ["fuse", "rank_only", "lexical_rank_score", "normalize_weights"]


def lexical_rank_score(rank: int, total: int) -> float:
    """Map a 0-based rank out of `total` matches onto [0, 1]."""
    if total <= 0:
        return 0.0
    return max(0.0, 1.0 - rank / total)


def fuse(
    lexical_matches: Sequence[PassageMatch],
    vector_matches: Sequence[PassageMatch],
    lexical_weight: float = 0.5,
    vector_weight: float = 0.5,
) -> list[FusedResult]:
    """
    Fuse lexical and vector matches.

    A passage found by both sources appears once, at the position its lexical
    match was seeded. Equal hybrid scores keep that insertion order.

    Args:
        lexical_matches: Matches in lexical rank order
        vector_matches: Matches carrying vector_similarity
        lexical_weight: Weight of the lexical score (raw, need not sum to 1)
        vector_weight: Weight of the vector score

    Returns:
        Results sorted by hybrid_score descending
    """
    merged: dict[str, FusedResult] = {}

    total = len(lexical_matches)
    for rank, match in enumerate(lexical_matches):
        if match.id in merged:
            continue
        merged[match.id] = FusedResult(
            id=match.id,
            document_id=match.document_id,
            text=match.text,
            lexical_score=lexical_rank_score(rank, total),
            vector_score=0.0,
        )

    for match in vector_matches:
        similarity = match.vector_similarity or 0.0
        existing = merged.get(match.id)
        if existing is not None:
            existing.vector_score = similarity
        else:
            merged[match.id] = FusedResult(
                id=match.id,
                document_id=match.document_id,
                text=match.text,
                lexical_score=0.0,
                vector_score=similarity,
            )

    for result in merged.values():
        result.hybrid_score = (
            lexical_weight * result.lexical_score + vector_weight * result.vector_score
        )

    # sorted() is stable with reverse=True
    return sorted(merged.values(), key=lambda r: r.hybrid_score, reverse=True)


def rank_only(matches: Sequence[PassageMatch]) -> list[FusedResult]:
    """
    Score single-source fallback matches by rank decay, keeping native order.

    hybrid_score equals lexical_score so consumers see a populated field.
    """
    results: list[FusedResult] = []
    seen: set[str] = set()
    total = len(matches)
    for rank, match in enumerate(matches):
        if match.id in seen:
            continue
        seen.add(match.id)
        score = lexical_rank_score(rank, total)
        results.append(
            FusedResult(
                id=match.id,
                document_id=match.document_id,
                text=match.text,
                lexical_score=score,
                vector_score=0.0,
                hybrid_score=score,
            )
        )
    return results


def normalize_weights(lexical_weight: float, vector_weight: float) -> tuple[float, float]:
    """Scale weights to sum to 1; non-positive totals fall back to an even split."""
    total = lexical_weight + vector_weight
    if total <= 0:
        return 0.5, 0.5
    return lexical_weight / total, vector_weight / total
