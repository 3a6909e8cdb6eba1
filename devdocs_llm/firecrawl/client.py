"""
Firecrawl API client.

Forwards crawl, status, map and scrape requests to the Firecrawl REST API
using aiohttp, attaching the server-held bearer credential.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import aiohttp
from aiohttp import ClientTimeout

from ..config import Settings
from ..errors import InvalidResponseError, MissingInputError, UpstreamError
from ..utils.constants import DEFAULT_FORMATS, DEFAULT_PAGE_LIMIT
from ..utils.log import get_logger
from ..utils.paths import is_under_base_url


IN_PROGRESS_STATUSES = ('scraping', 'processing')


def shape_status(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a Firecrawl crawl status payload.
    
    In-progress jobs report only their counters, completed jobs carry their
    page data and pagination cursor, and every other payload is reduced to a
    ``failed`` or ``unknown`` status with an error message.
    
    Args:
        data: Raw status payload from Firecrawl
        
    Returns:
        Normalized status dictionary
    """
    status = data.get('status')
    
    if status in IN_PROGRESS_STATUSES:
        return {
            'status': status,
            'total': data.get('total') or 0,
            'completed': data.get('completed') or 0,
        }
    
    if status == 'completed' and data.get('data') is not None:
        return {
            'status': 'completed',
            'total': data.get('total') or 0,
            'completed': data.get('completed') or 0,
            'data': data['data'],
            'next': data.get('next'),
        }
    
    if status == 'failed':
        return {
            'status': 'failed',
            'error': data.get('error') or 'Unknown error occurred',
        }
    
    return {
        'status': 'unknown',
        'error': 'Unexpected response from Firecrawl API',
    }


class FirecrawlClient:
    """
    Thin async client for the Firecrawl v1 API.
    
    Each call opens its own session and performs exactly one request; there
    are no retries and nothing is cached.
    """
    
    def __init__(self, settings: Settings):
        """
        Initialize the client.
        
        Args:
            settings: Runtime settings holding the API URL, key and timeout
        """
        self.settings = settings
        self.base_url = settings.api_url.rstrip('/')
        self.timeout = ClientTimeout(total=settings.timeout)
        self.logger = get_logger("firecrawl")
    
    async def _request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Tuple[int, Any]:
        """
        Perform one authenticated request.
        
        Returns:
            Tuple of (HTTP status, decoded JSON body or empty dict)
        """
        headers = {'Authorization': f'Bearer {self.settings.require_api_key()}'}
        
        async with aiohttp.ClientSession(timeout=self.timeout, headers=headers) as session:
            async with session.request(method, url, json=payload) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = {}
                return response.status, body if body is not None else {}
    
    async def _call(
        self,
        method: str,
        url: str,
        default_error: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Perform a request and raise UpstreamError on non-2xx answers."""
        self.settings.require_api_key()
        self.logger.debug(f"{method} {url}")
        
        status, body = await self._request(method, url, payload)
        
        if not 200 <= status < 300:
            message = None
            if isinstance(body, dict):
                message = body.get('message') or body.get('error')
            self.logger.error(f"Firecrawl error {status} for {url}: {message or body}")
            raise UpstreamError(
                message if isinstance(message, str) and message else default_error,
                status,
                body if isinstance(body, dict) else None
            )
        
        if not isinstance(body, dict):
            raise InvalidResponseError('Invalid response from Firecrawl API')
        
        return body
    
    async def start_crawl(
        self,
        url: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        allow_backward_links: bool = False,
        scrape_options: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Start an asynchronous crawl job.
        
        Args:
            url: Documentation URL to crawl
            limit: Maximum number of pages
            allow_backward_links: Whether the crawler may leave the URL's path
            scrape_options: Firecrawl scrape options for every page
            
        Returns:
            The crawl job identifier
        """
        body = await self._call('POST', f'{self.base_url}/crawl', 'Failed to crawl URL', {
            'url': url,
            'limit': limit,
            'allowBackwardLinks': allow_backward_links,
            'scrapeOptions': scrape_options or {'formats': list(DEFAULT_FORMATS)},
        })
        
        if not body.get('success') or not body.get('id'):
            self.logger.error(f"Invalid Firecrawl response: {body}")
            raise InvalidResponseError('Invalid response from Firecrawl API')
        
        self.logger.info(f"Started crawl {body['id']} for {url}")
        return body['id']
    
    async def crawl_status(self, job_id: str) -> Dict[str, Any]:
        """Fetch and normalize the status of a crawl job."""
        body = await self._call(
            'GET',
            f'{self.base_url}/crawl/{quote(job_id, safe="")}',
            'Failed to check crawl status'
        )
        return shape_status(body)
    
    async def crawl_next(self, next_url: str) -> Dict[str, Any]:
        """
        Follow a pagination cursor returned with a completed crawl.
        
        Raises:
            MissingInputError: If the cursor does not point at the Firecrawl API
        """
        if not next_url or not is_under_base_url(next_url, self.base_url):
            raise MissingInputError('Invalid pagination cursor')
        
        body = await self._call('GET', next_url, 'Failed to fetch next chunk')
        return shape_status(body)
    
    async def map(self, url: str, search: Optional[str] = None) -> Dict[str, Any]:
        """List the URLs of a site, optionally filtered by a search term."""
        payload: Dict[str, Any] = {'url': url}
        if search:
            payload['search'] = search
        return await self._call('POST', f'{self.base_url}/map', 'Failed to map URL', payload)
    
    async def scrape(
        self,
        url: str,
        formats: Optional[List[str]] = None,
        extract: Optional[Dict[str, Any]] = None,
        actions: Optional[List[Dict[str, Any]]] = None,
        location: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Scrape a single page synchronously."""
        payload: Dict[str, Any] = {
            'url': url,
            'formats': formats or list(DEFAULT_FORMATS),
        }
        if extract:
            payload['extract'] = extract
        if actions:
            payload['actions'] = actions
        if location:
            payload['location'] = location
        return await self._call('POST', f'{self.base_url}/scrape', 'Failed to scrape URL', payload)
