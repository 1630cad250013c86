"""
CLI Interface - Command-line tools for NeuraNotes.

Provides commands for:
- Hybrid search queries
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
