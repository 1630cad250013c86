"""
FAISS Adapter - Vector similarity search.
"""

from .index import INDEX_FILE, METADATA_FILE, FAISSIndex

__all__ = ["FAISSIndex", "INDEX_FILE", "METADATA_FILE"]
