"""
Crawler module for DevDocs to LLM.

Contains the job model, the proxy client, the poll-and-aggregate loop and
the session that records finished crawls.
"""

from .models import CrawlJob, CrawlState, CrawlStatus, PageResult, HistoryEntry
from .api import CrawlApi, ProxyApi
from .poller import CrawlPoller
from .session import CrawlSession, SubmitResult

__all__ = [
    "CrawlJob",
    "CrawlState",
    "CrawlStatus",
    "PageResult",
    "HistoryEntry",
    "CrawlApi",
    "ProxyApi",
    "CrawlPoller",
    "CrawlSession",
    "SubmitResult",
]
