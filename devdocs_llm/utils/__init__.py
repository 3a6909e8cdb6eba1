"""
Utility modules for DevDocs to LLM.

Contains logging, path handling utilities, and constants.
"""

from .log import setup_logger, get_logger
from .paths import url_to_slug, page_filename, is_under_base_url, ensure_parent_dir
from .constants import (
    DEFAULT_FIRECRAWL_API_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_PROXY_URL,
    POLL_INTERVAL,
    MAX_POLL_ATTEMPTS,
    DEFAULT_PAGE_LIMIT,
    MAX_HISTORY_ITEMS,
    HISTORY_STORAGE_KEY,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "url_to_slug",
    "page_filename",
    "is_under_base_url",
    "ensure_parent_dir",
    "DEFAULT_FIRECRAWL_API_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_PROXY_URL",
    "POLL_INTERVAL",
    "MAX_POLL_ATTEMPTS",
    "DEFAULT_PAGE_LIMIT",
    "MAX_HISTORY_ITEMS",
    "HISTORY_STORAGE_KEY",
]
