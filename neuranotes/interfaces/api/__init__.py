"""
API Interface - FastAPI REST API over the hybrid search engine.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
