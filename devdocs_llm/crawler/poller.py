"""
Poll-and-aggregate loop for crawl jobs.

Starts a crawl through the proxy, polls its status on a fixed interval until
it completes, fails or runs out of attempts, then follows the pagination
cursors and assembles the ordered page list.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .api import CrawlApi
from .models import CrawlJob, CrawlState, CrawlStatus, PageResult
from ..errors import (
    CrawlError,
    CrawlTimeoutError,
    DevDocsError,
    InvalidResponseError,
    JobFailedError,
    UpstreamError,
)
from ..utils.constants import DEFAULT_PAGE_LIMIT, MAX_POLL_ATTEMPTS, POLL_INTERVAL
from ..utils.log import get_logger


ProgressCallback = Callable[[CrawlJob], None]
SleepFunc = Callable[[float], Awaitable[Any]]


class CrawlPoller:
    """
    Drives one crawl job from start to its page list.
    
    The clock is injected through ``sleep`` so tests can run the loop
    without waiting; ``on_progress`` receives the job after every state or
    progress change.
    """
    
    def __init__(
        self,
        api: CrawlApi,
        sleep: SleepFunc = asyncio.sleep,
        poll_interval: float = POLL_INTERVAL,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        on_progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize the poller.
        
        Args:
            api: Proxy client used for start, status and next-chunk calls
            sleep: Coroutine function used to wait between status checks
            poll_interval: Seconds between status checks
            max_attempts: Status checks before giving up
            on_progress: Optional callback notified with the job
        """
        self.api = api
        self.sleep = sleep
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.on_progress = on_progress
        self.logger = get_logger("poller")
        self.job: Optional[CrawlJob] = None
    
    def _notify(self, job: CrawlJob) -> None:
        if self.on_progress:
            self.on_progress(job)
    
    def _set_state(self, job: CrawlJob, state: CrawlState) -> None:
        job.state = state
        self._notify(job)
    
    def _fail(self, job: CrawlJob, error: DevDocsError) -> DevDocsError:
        job.error = error.message
        self._set_state(
            job,
            CrawlState.TIMED_OUT if isinstance(error, CrawlTimeoutError) else CrawlState.FAILED
        )
        return error
    
    async def run(self, url: str, limit: int = DEFAULT_PAGE_LIMIT) -> List[PageResult]:
        """
        Crawl ``url`` and return its pages in provider order.
        
        Raises:
            UpstreamError: If the proxy rejects the start call
            InvalidResponseError: If the start call returns no job identifier
            JobFailedError: If the provider reports the job as failed
            CrawlError: If a status check fails
            CrawlTimeoutError: If the job does not complete within the attempt ceiling
        """
        job = await self.start(url, limit)
        payload = await self.poll(job)
        return await self.collect(job, payload)
    
    async def start(self, url: str, limit: int = DEFAULT_PAGE_LIMIT) -> CrawlJob:
        """Start the crawl job."""
        self.job = CrawlJob(id="", url=url)
        self._notify(self.job)
        
        try:
            data = await self.api.start_crawl(url, limit)
        except UpstreamError as e:
            raise self._fail(self.job, e)
        
        if not data.get('success') or not isinstance(data.get('id'), str) or not data['id']:
            self.logger.error(f"Invalid crawl response: {data}")
            raise self._fail(self.job, InvalidResponseError('Invalid response from crawl endpoint'))
        
        self.job.id = data['id']
        self.logger.info(f"Starting status polling for ID: {self.job.id}")
        return self.job
    
    async def poll(self, job: CrawlJob) -> Dict[str, Any]:
        """
        Poll the job until it completes.
        
        Returns:
            The status payload of the completed job
        """
        self._set_state(job, CrawlState.POLLING)
        
        while job.attempts < self.max_attempts:
            await self.sleep(self.poll_interval)
            job.attempts += 1
            self.logger.debug(f"Polling attempt {job.attempts}/{self.max_attempts}")
            
            try:
                payload = await self.api.crawl_status(job.id)
            except UpstreamError as e:
                if e.payload.get('status') == CrawlStatus.FAILED.value:
                    raise self._fail(job, JobFailedError(e.payload.get('error') or 'Crawl failed'))
                self.logger.error(f"Status check failed: {e.message}")
                raise self._fail(job, CrawlError('Failed to check crawl status'))
            
            job.update(payload)
            self._notify(job)
            
            if job.status == CrawlStatus.FAILED:
                raise self._fail(job, JobFailedError(payload.get('error') or 'Crawl failed'))
            
            if job.status == CrawlStatus.COMPLETED:
                self.logger.info("Crawl completed, processing results")
                return payload
            
            if job.status.in_progress:
                self.logger.info(f"Crawl in progress: {job.completed}/{job.total}")
            else:
                self.logger.warning(f"Unknown status: {payload.get('status')}")
        
        raise self._fail(job, CrawlTimeoutError('Crawl timed out - please try again'))
    
    async def collect(self, job: CrawlJob, payload: Dict[str, Any]) -> List[PageResult]:
        """
        Follow pagination cursors and build the page list.
        
        A failed chunk fetch ends pagination; the pages gathered so far are kept.
        """
        raw_pages: List[Any] = list(payload.get('data') or [])
        next_url = payload.get('next')
        
        if next_url:
            self._set_state(job, CrawlState.FETCHING_NEXT_PAGE)
        
        while next_url:
            try:
                chunk = await self.api.crawl_next(next_url)
            except Exception as e:
                self.logger.warning(f"Error fetching next chunk: {e}")
                break
            
            raw_pages.extend(chunk.get('data') or [])
            job.update_counters(chunk)
            self._notify(job)
            next_url = chunk.get('next')
        
        pages = []
        for raw in raw_pages:
            page = PageResult.from_provider(raw)
            if page is not None:
                pages.append(page)
        
        self.logger.info(f"Processed results: {len(pages)} of {len(raw_pages)} pages")
        self._set_state(job, CrawlState.COMPLETED)
        return pages
