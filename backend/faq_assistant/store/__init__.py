"""Vector store implementations."""

from .base import VectorStore, rank_by_similarity
from .memory import InMemoryVectorStore
from .sqlite_store import SQLiteVectorStore

__all__ = [
    "VectorStore",
    "rank_by_similarity",
    "InMemoryVectorStore",
    "SQLiteVectorStore",
]
