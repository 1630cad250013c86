"""
SQLite Adapter - Passage full-text search and document directory.
"""

from .repository import SQLiteRepository, to_fts_query

__all__ = ["SQLiteRepository", "to_fts_query"]
