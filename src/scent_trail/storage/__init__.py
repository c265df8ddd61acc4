"""存储层。"""

from __future__ import annotations

from ..config import RecommenderConfig
from .base import CorpusStore, MethodData
from .in_memory import InMemoryCorpusStore
from .sqlite_store import SQLiteCorpusStore

__all__ = [
    "CorpusStore",
    "InMemoryCorpusStore",
    "MethodData",
    "SQLiteCorpusStore",
    "create_store",
]


def create_store(config: RecommenderConfig) -> CorpusStore:
    if config.storage_backend == "sqlite":
        return SQLiteCorpusStore(config.storage_path)
    return InMemoryCorpusStore()
