"""
Hybrid Search Engine - Fallback cascade over embedding, lexical, vector and
direct-document search.

Cascade per attempt:
- Empty query: no-results, no collaborator calls
- Embedding available: lexical + vector concurrently, then fusion
- Embedding unavailable: lexical alone
- Nothing found by the stores: document substring scan
- Unexpected orchestration failure: error outcome
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from pydantic import ValidationError

from neuranotes.config.errors import EmbeddingUnavailable

from .fusion import fuse, normalize_weights, rank_only
from .models import FusedResult, Query, SearchMethod, SearchOptions, SearchOutcome

if TYPE_CHECKING:
    from .embedding import EmbeddingClient
    from .executors import DocumentFallbackExecutor, LexicalSearchExecutor, VectorSearchExecutor

logger = logging.getLogger(__name__)

__all__ = [
    "HybridSearchEngine",
    "hybrid_search",
    "search_document",
    "global_search",
    "weighted_search",
    "keyword_search",
    "semantic_search",
    "KEYWORD_WEIGHTS",
    "SEMANTIC_WEIGHTS",
]

KEYWORD_WEIGHTS = (0.8, 0.2)
SEMANTIC_WEIGHTS = (0.2, 0.8)


class HybridSearchEngine:
    """
    Hybrid search with graceful degradation.

    Example:
        >>> engine = HybridSearchEngine(embedder, lexical, vector, documents)
        >>> outcome = await engine.search(Query(text="artificial intelligence"))
        >>> outcome.method
        <SearchMethod.FUSED: 'fused'>
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        lexical: LexicalSearchExecutor,
        vector: VectorSearchExecutor,
        document_fallback: DocumentFallbackExecutor,
        candidate_multiplier: int = 2,
    ) -> None:
        """
        Initialize hybrid search engine.

        Args:
            embedding_client: Query embedding client
            lexical: Full-text executor
            vector: Similarity executor
            document_fallback: Direct document scan, used when stores are empty
            candidate_multiplier: Candidate pool size per source, as a
                multiple of the query limit, on the fused path
        """
        self._embedder = embedding_client
        self._lexical = lexical
        self._vector = vector
        self._documents = document_fallback
        self._candidate_multiplier = max(1, candidate_multiplier)

    @property
    def embedding_configured(self) -> bool:
        """False when every search will take the keyword-only path."""
        return self._embedder.configured

    async def aclose(self) -> None:
        """Release resources held by the embedding client."""
        await self._embedder.aclose()

    async def search(self, query: Query) -> SearchOutcome:
        """
        Execute the cascade for one query.

        Never raises for store or embedding failures; cancellation propagates.
        """
        start = time.perf_counter()

        if query.is_empty:
            return SearchOutcome(
                success=True,
                query=query.text,
                method=SearchMethod.NO_RESULTS,
                duration_ms=_elapsed_ms(start),
            )

        try:
            results, method = await self._run_cascade(query)
        except Exception as e:
            logger.exception("Hybrid search failed: query=%r", query.text[:50])
            return SearchOutcome(
                success=False,
                query=query.text,
                method=SearchMethod.ERROR,
                error=str(e) or type(e).__name__,
                duration_ms=_elapsed_ms(start),
            )

        results = results[: query.limit]
        duration_ms = _elapsed_ms(start)

        logger.info(
            "Hybrid search: query='%s' method=%s -> %d results in %.1fms",
            query.text[:50],
            method.value,
            len(results),
            duration_ms,
        )

        return SearchOutcome(
            success=True,
            query=query.text,
            results=results,
            total=len(results),
            method=method,
            duration_ms=duration_ms,
        )

    async def _run_cascade(self, query: Query) -> tuple[list[FusedResult], SearchMethod]:
        text = query.normalized_text
        scope = query.scope_document_id

        try:
            vector = await self._embedder.embed(text)
        except EmbeddingUnavailable as e:
            logger.warning("Embedding unavailable, falling back to lexical search: %s", e.message)
            return await self._search_without_embedding(query)

        pool = query.limit * self._candidate_multiplier
        lexical_matches, vector_matches = await asyncio.gather(
            self._lexical.search(text, scope, pool),
            self._vector.search(vector, scope, pool),
        )

        if lexical_matches or vector_matches:
            fused = fuse(
                lexical_matches,
                vector_matches,
                query.lexical_weight,
                query.vector_weight,
            )
            return fused, SearchMethod.FUSED

        logger.info("Lexical and vector search empty, scanning documents")
        return await self._search_documents(query)

    async def _search_without_embedding(
        self, query: Query
    ) -> tuple[list[FusedResult], SearchMethod]:
        matches = await self._lexical.search(
            query.normalized_text, query.scope_document_id, query.limit
        )
        if matches:
            return rank_only(matches), SearchMethod.LEXICAL_FALLBACK

        logger.info("Lexical search empty, scanning documents")
        return await self._search_documents(query)

    async def _search_documents(self, query: Query) -> tuple[list[FusedResult], SearchMethod]:
        matches = await self._documents.search(
            query.normalized_text, query.scope_document_id, query.limit
        )
        if matches:
            return rank_only(matches), SearchMethod.DOCUMENT_FALLBACK
        return [], SearchMethod.NO_RESULTS


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def build_query(
    query_text: str,
    options: SearchOptions | None = None,
    default_limit: int = 10,
) -> Query:
    """Build a Query from caller options, applying defaults for unset fields."""
    options = options or SearchOptions()
    return Query(
        text=query_text or "",
        scope_document_id=options.document_id,
        limit=options.limit or default_limit,
        lexical_weight=0.5 if options.lexical_weight is None else options.lexical_weight,
        vector_weight=0.5 if options.vector_weight is None else options.vector_weight,
    )


async def hybrid_search(
    engine: HybridSearchEngine,
    query_text: str,
    options: SearchOptions | None = None,
) -> SearchOutcome:
    """
    Search entry point for presentation layers.

    Malformed input (e.g. text over 1000 characters) yields a failed outcome
    rather than an exception.
    """
    try:
        query = build_query(query_text, options)
    except ValidationError as e:
        message = e.errors()[0]["msg"] if e.errors() else str(e)
        logger.warning("Rejected search query: %s", message)
        return SearchOutcome(
            success=False,
            query=query_text or "",
            method=SearchMethod.ERROR,
            error=f"Invalid query: {message}",
        )
    return await engine.search(query)


async def search_document(
    engine: HybridSearchEngine,
    query_text: str,
    document_id: str,
    options: SearchOptions | None = None,
) -> SearchOutcome:
    """Search within one document; limit defaults to 5."""
    options = options or SearchOptions()
    scoped = options.model_copy(update={"document_id": document_id, "limit": options.limit or 5})
    return await hybrid_search(engine, query_text, scoped)


async def global_search(
    engine: HybridSearchEngine,
    query_text: str,
    options: SearchOptions | None = None,
) -> SearchOutcome:
    """Search across all documents."""
    options = options or SearchOptions()
    return await hybrid_search(engine, query_text, options.model_copy(update={"document_id": None}))


async def weighted_search(
    engine: HybridSearchEngine,
    query_text: str,
    lexical_weight: float,
    vector_weight: float,
    options: SearchOptions | None = None,
) -> SearchOutcome:
    """Search with custom weights, normalized to sum to 1."""
    lexical_weight, vector_weight = normalize_weights(lexical_weight, vector_weight)
    options = options or SearchOptions()
    weighted = options.model_copy(
        update={"lexical_weight": lexical_weight, "vector_weight": vector_weight}
    )
    return await hybrid_search(engine, query_text, weighted)


async def keyword_search(
    engine: HybridSearchEngine,
    query_text: str,
    options: SearchOptions | None = None,
) -> SearchOutcome:
    """Keyword-focused search (lexical weight 0.8)."""
    return await weighted_search(engine, query_text, *KEYWORD_WEIGHTS, options=options)


async def semantic_search(
    engine: HybridSearchEngine,
    query_text: str,
    options: SearchOptions | None = None,
) -> SearchOutcome:
    """Semantic-focused search (vector weight 0.8)."""
    return await weighted_search(engine, query_text, *SEMANTIC_WEIGHTS, options=options)
