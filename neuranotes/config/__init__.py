"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    EmbeddingUnavailable,
    ErrorCode,
    NeuraNotesError,
    SearchError,
    StorageError,
)
from .settings import Settings, configure_logging, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "ErrorCode",
    "NeuraNotesError",
    "SearchError",
    "EmbeddingUnavailable",
    "StorageError",
]
