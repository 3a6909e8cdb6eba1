"""
Firecrawl module for DevDocs to LLM.

Contains the upstream API client used by the proxy routes.
"""

from .client import FirecrawlClient, shape_status

__all__ = [
    "FirecrawlClient",
    "shape_status",
]
