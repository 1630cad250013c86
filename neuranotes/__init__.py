"""
NeuraNotes - Hybrid passage retrieval for a personal notes workspace.

Example:
    >>> from neuranotes.domains.search import hybrid_search
    >>> outcome = await hybrid_search(engine, "artificial intelligence")
    >>> outcome.method.value
    'fused'
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
