"""
Client side of the proxy routes.

``CrawlApi`` is the seam the poll loop talks through; ``ProxyApi`` is the
aiohttp implementation that calls a running DevDocs proxy.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp
from aiohttp import ClientTimeout

from ..errors import UpstreamError
from ..utils.constants import DEFAULT_PAGE_LIMIT, DEFAULT_PROXY_URL, DEFAULT_TIMEOUT
from ..utils.log import get_logger


class CrawlApi(ABC):
    """
    Operations the poll loop needs from the proxy.
    
    Implementations return the decoded JSON body on 2xx answers and raise
    ``UpstreamError`` (with the decoded body as ``payload``) otherwise.
    """
    
    @abstractmethod
    async def start_crawl(self, url: str, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        """Start a crawl job."""
    
    @abstractmethod
    async def crawl_status(self, job_id: str) -> Dict[str, Any]:
        """Read the status of a crawl job."""
    
    @abstractmethod
    async def crawl_next(self, next_url: str) -> Dict[str, Any]:
        """Fetch the next chunk of a completed crawl."""


class ProxyApi(CrawlApi):
    """CrawlApi backed by HTTP calls to the proxy routes."""
    
    def __init__(self, base_url: str = DEFAULT_PROXY_URL, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the proxy client.
        
        Args:
            base_url: URL the proxy's ``/api`` routes are mounted at
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = ClientTimeout(total=timeout)
        self.logger = get_logger("proxy_api")
    
    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        url = f'{self.base_url}{path}'
        
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, json=payload) as response:
                    status = response.status
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        body = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"Request to {url} failed: {e}")
            raise UpstreamError(f'Could not reach the proxy: {e}', 502)
        
        if not isinstance(body, dict):
            body = {}
        
        if status >= 400:
            message = body.get('error') or f'Request to {path} failed'
            raise UpstreamError(str(message), status, body)
        
        return body
    
    async def start_crawl(self, url: str, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        return await self._request('POST', '/crawl', {'url': url, 'limit': limit})
    
    async def crawl_status(self, job_id: str) -> Dict[str, Any]:
        return await self._request('GET', f'/crawl/status/{quote(job_id, safe="")}')
    
    async def crawl_next(self, next_url: str) -> Dict[str, Any]:
        return await self._request('POST', '/crawl/next', {'next': next_url})
