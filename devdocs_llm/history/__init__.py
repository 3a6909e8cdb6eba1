"""
History module for DevDocs to LLM.

Persists the most recent crawl results through a pluggable key-value store.
"""

from .store import HistoryStore, KeyValueStore, MemoryStore, JsonFileStore

__all__ = [
    "HistoryStore",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
]
