"""
DevDocs to LLM - turn documentation sites into LLM-ready bundles.

This package proxies crawl requests to the Firecrawl API, polls crawl jobs
to completion, keeps a short local history of results and renders them as
Markdown, XML or zip archives.
"""

__version__ = "1.0.0"
__author__ = "DevDocs Team"
