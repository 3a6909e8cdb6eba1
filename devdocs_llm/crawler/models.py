"""
Data model for crawl jobs and their results.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class CrawlStatus(str, Enum):
    """Job status as reported by the provider."""
    
    QUEUED = "queued"
    SCRAPING = "scraping"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    UNKNOWN = "unknown"
    
    @classmethod
    def parse(cls, value: Optional[str]) -> "CrawlStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN
    
    @property
    def in_progress(self) -> bool:
        return self in (CrawlStatus.SCRAPING, CrawlStatus.PROCESSING)


class CrawlState(str, Enum):
    """Where the poll-and-aggregate loop currently is."""
    
    STARTING = "starting"
    POLLING = "polling"
    FETCHING_NEXT_PAGE = "fetching-next-page"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed-out"
    
    @property
    def terminal(self) -> bool:
        return self in (CrawlState.COMPLETED, CrawlState.FAILED, CrawlState.TIMED_OUT)


@dataclass(frozen=True)
class PageResult:
    """One crawled page: its source URL and Markdown content."""
    
    url: str
    content: str
    
    @classmethod
    def from_provider(cls, page: Dict[str, Any]) -> Optional["PageResult"]:
        """
        Build a result from a provider page, or None if it lacks a URL or Markdown.
        """
        if not isinstance(page, dict):
            return None
        metadata = page.get('metadata') or {}
        url = metadata.get('sourceURL') if isinstance(metadata, dict) else None
        markdown = page.get('markdown')
        if not url or not markdown:
            return None
        return cls(url=url, content=markdown)
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageResult":
        return cls(url=str(data['url']), content=str(data['content']))
    
    def to_dict(self) -> Dict[str, str]:
        return {'url': self.url, 'content': self.content}


def pages_from_dicts(items: Iterable[Dict[str, Any]]) -> List[PageResult]:
    """Parse ``[{url, content}]`` dictionaries, raising on missing keys."""
    return [PageResult.from_dict(item) for item in items]


def compute_progress(completed: int, total: int) -> int:
    """Percentage of completed pages, rounded half-up."""
    return int(math.floor(completed / total * 100 + 0.5))


@dataclass
class CrawlJob:
    """
    A crawl job tracked by the provider.
    
    Created by the start call and mutated only by status reads.
    """
    
    id: str
    url: str = ""
    status: CrawlStatus = CrawlStatus.QUEUED
    state: CrawlState = CrawlState.STARTING
    total: int = 0
    completed: int = 0
    next: Optional[str] = None
    attempts: int = 0
    progress: int = 0
    error: Optional[str] = None
    
    def update(self, payload: Dict[str, Any]) -> None:
        """Apply a status payload to the job."""
        self.status = CrawlStatus.parse(payload.get('status'))
        self.update_counters(payload)
    
    def update_counters(self, payload: Dict[str, Any]) -> None:
        """Apply the counters and cursor of a status or next-chunk payload."""
        self.total = payload.get('total') or self.total
        self.completed = payload.get('completed') or self.completed
        self.next = payload.get('next')
        
        total = payload.get('total')
        completed = payload.get('completed')
        if total and completed:
            self.progress = compute_progress(completed, total)


@dataclass
class HistoryEntry:
    """One completed job's input URL and ordered results."""
    
    url: str
    results: List[PageResult] = field(default_factory=list)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'url': self.url,
            'results': [asdict(result) for result in self.results],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            url=data.get('url', ''),
            results=pages_from_dicts(data.get('results') or []),
            timestamp=data.get('timestamp', ''),
        )
