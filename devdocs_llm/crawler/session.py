"""
Crawl session: runs crawls one after another and records them in history.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from .poller import CrawlPoller
from .models import PageResult
from ..errors import DevDocsError
from ..utils.constants import DEFAULT_PAGE_LIMIT
from ..utils.log import get_logger

if TYPE_CHECKING:
    from ..history import HistoryStore


@dataclass
class SubmitResult:
    """Outcome of one submission: pages on success, a one-line error otherwise."""
    
    url: str
    pages: List[PageResult] = field(default_factory=list)
    error: Optional[str] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None


class CrawlSession:
    """
    Submits crawls and keeps the latest results.
    
    Failures never leave the session unusable: each submission starts from a
    clean slate and reports its error as a single line.
    """
    
    def __init__(self, poller: CrawlPoller, history: "HistoryStore"):
        self.poller = poller
        self.history = history
        self.results: List[PageResult] = []
        self.error: Optional[str] = None
        self.logger = get_logger("session")
    
    async def submit(self, url: str, limit: int = DEFAULT_PAGE_LIMIT) -> SubmitResult:
        """
        Crawl ``url`` and record the pages in history.
        
        Args:
            url: Documentation URL
            limit: Maximum number of pages
            
        Returns:
            SubmitResult with the pages or an error message
        """
        self.error = None
        url = (url or '').strip()
        
        if not url:
            self.error = 'URL is required'
            return SubmitResult(url=url, error=self.error)
        
        try:
            pages = await self.poller.run(url, limit)
        except DevDocsError as e:
            self.logger.error(f"Crawl of {url} failed: {e.message}")
            self.error = e.message
            return SubmitResult(url=url, error=self.error)
        
        self.results = pages
        self.history.add(url, pages)
        return SubmitResult(url=url, pages=pages)
    
    def select_history(self, index: int) -> List[PageResult]:
        """Load a previous result set as the current results."""
        entry = self.history.get(index)
        self.results = list(entry.results)
        self.logger.info(f"Previous results loaded: {entry.url}")
        return self.results
    
    def clear_history(self) -> None:
        self.history.clear()
