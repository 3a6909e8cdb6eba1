"""
Local history of completed crawls.

History lives in a key-value store under a single key holding a JSON array,
newest entry first, bounded to a fixed number of entries.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..crawler.models import HistoryEntry, PageResult
from ..utils.constants import HISTORY_STORAGE_KEY, MAX_HISTORY_ITEMS
from ..utils.log import get_logger
from ..utils.paths import ensure_parent_dir


class KeyValueStore(ABC):
    """Minimal string key-value storage, in the manner of browser local storage."""
    
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
    
    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value."""
    
    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""


class MemoryStore(KeyValueStore):
    """In-memory store, lost when the process exits."""
    
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
    
    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)
    
    def set(self, key: str, value: str) -> None:
        self._data[key] = value
    
    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store persisted as one JSON object in a file.
    
    The whole file is rewritten on every change; a single writer is assumed.
    """
    
    def __init__(self, path: str):
        """
        Initialize the store.
        
        Args:
            path: File holding the stored keys
        """
        self.path = os.path.abspath(path)
        self.logger = get_logger("history")
    
    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read {self.path}: {e}")
            return {}
        
        return data if isinstance(data, dict) else {}
    
    def _write(self, data: Dict[str, str]) -> None:
        ensure_parent_dir(self.path)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, self.path)
    
    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)
    
    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
    
    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class HistoryStore:
    """
    Bounded, newest-first history of completed crawls.
    
    The key-value store is the single source of truth; every read parses the
    stored value and every change writes it back.
    """
    
    def __init__(
        self,
        store: KeyValueStore,
        capacity: int = MAX_HISTORY_ITEMS,
        key: str = HISTORY_STORAGE_KEY
    ):
        self.store = store
        self.capacity = capacity
        self.key = key
        self.logger = get_logger("history")
    
    def entries(self) -> List[HistoryEntry]:
        """Return the stored entries, newest first."""
        raw = self.store.get(self.key)
        if not raw:
            return []
        
        try:
            items = json.loads(raw)
            return [HistoryEntry.from_dict(item) for item in items[:self.capacity]]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            self.logger.error(f"Failed to parse history: {e}")
            return []
    
    def add(self, url: str, results: List[PageResult]) -> HistoryEntry:
        """
        Record a completed crawl, evicting the oldest entries beyond capacity.
        
        Args:
            url: URL the crawl was started from
            results: Ordered pages of the crawl
            
        Returns:
            The new entry
        """
        entry = HistoryEntry(url=url, results=list(results))
        history = [entry] + self.entries()
        history = history[:self.capacity]
        
        self.store.set(self.key, json.dumps([item.to_dict() for item in history]))
        self.logger.debug(f"History holds {len(history)} entries")
        return entry
    
    def get(self, index: int) -> HistoryEntry:
        """
        Return the entry at ``index`` (0 is the newest).
        
        Raises:
            IndexError: If there is no such entry
        """
        return self.entries()[index]
    
    def clear(self) -> None:
        """Forget all entries."""
        self.store.delete(self.key)
        self.logger.info("History cleared successfully")
    
    def __len__(self) -> int:
        return len(self.entries())
