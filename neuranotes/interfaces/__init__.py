"""
Interfaces - User-facing entry points.

- api: FastAPI REST API
- cli: Command-line interface
"""

__all__ = ["api", "cli"]
