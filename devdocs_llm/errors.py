"""
Exception hierarchy for DevDocs to LLM.

Every error carries the HTTP status code the proxy answers with, so routes
and the client can report failures as a single ``{"error": message}`` line.
"""

from typing import Optional


class DevDocsError(Exception):
    """Base class for all DevDocs to LLM errors."""
    
    status_code = 500
    
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
    
    def to_dict(self) -> dict:
        """Uniform error payload."""
        return {'error': self.message}


class MissingInputError(DevDocsError):
    """A required request field is missing or invalid."""
    
    status_code = 400


class MissingConfigurationError(DevDocsError):
    """The Firecrawl credential is not configured."""
    
    status_code = 500


class UpstreamError(DevDocsError):
    """The upstream service answered with a non-2xx status."""
    
    def __init__(self, message: str, status_code: int = 500, payload: Optional[dict] = None):
        super().__init__(message, status_code)
        self.payload = payload or {}


class InvalidResponseError(DevDocsError):
    """The upstream service answered 2xx with an unusable body."""
    
    status_code = 500


class CrawlError(DevDocsError):
    """A crawl job could not be driven to completion."""
    
    status_code = 502


class JobFailedError(CrawlError):
    """The provider reported the crawl job as failed."""
    
    status_code = 500


class CrawlTimeoutError(CrawlError):
    """Polling exceeded the attempt ceiling."""
    
    status_code = 504
