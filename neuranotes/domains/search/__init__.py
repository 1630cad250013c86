"""
Search Domain - Hybrid passage retrieval with graceful degradation.

This domain handles:
- Query embedding (with an explicit "unconfigured" path)
- Lexical, vector and direct-document search executors
- Rank-decay score fusion
- The fallback cascade (fused -> lexical -> document -> no results)
- Debounced, cancellable search sessions
"""

from .cascade import (
    HybridSearchEngine,
    global_search,
    hybrid_search,
    keyword_search,
    search_document,
    semantic_search,
    weighted_search,
)
from .content import PlainTextExtractor
from .contracts import (
    ContentExtractor,
    DocumentDirectory,
    EmbeddingService,
    SearchEngine,
    TextStore,
    VectorStore,
)
from .embedding import EmbeddingClient, UnconfiguredEmbeddingService
from .executors import DocumentFallbackExecutor, LexicalSearchExecutor, VectorSearchExecutor
from .formatting import format_results, highlight_terms
from .fusion import fuse, lexical_rank_score, normalize_weights, rank_only
from .models import (
    DisplayResult,
    FusedResult,
    PassageMatch,
    Query,
    SearchMethod,
    SearchOptions,
    SearchOutcome,
    SessionState,
)
from .session import SearchSession

__all__ = [
    # Contracts
    "EmbeddingService",
    "TextStore",
    "VectorStore",
    "ContentExtractor",
    "DocumentDirectory",
    "SearchEngine",
    # Models
    "Query",
    "SearchOptions",
    "PassageMatch",
    "FusedResult",
    "SearchMethod",
    "SearchOutcome",
    "DisplayResult",
    "SessionState",
    # Components
    "EmbeddingClient",
    "UnconfiguredEmbeddingService",
    "LexicalSearchExecutor",
    "VectorSearchExecutor",
    "DocumentFallbackExecutor",
    "PlainTextExtractor",
    "HybridSearchEngine",
    "SearchSession",
    # Functions
    "fuse",
    "rank_only",
    "lexical_rank_score",
    "normalize_weights",
    "hybrid_search",
    "search_document",
    "global_search",
    "weighted_search",
    "keyword_search",
    "semantic_search",
    "format_results",
    "highlight_terms",
]
