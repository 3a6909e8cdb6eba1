"""
In-process stand-ins for the proxy API and the clock.
"""

from devdocs_llm.crawler.api import CrawlApi


def provider_page(url, markdown="content"):
    return {"markdown": markdown, "metadata": {"sourceURL": url}}


class ScriptedApi(CrawlApi):
    """
    CrawlApi replaying scripted replies.

    ``statuses`` are returned in order, the last one repeating forever;
    ``chunks`` maps cursors to next-chunk replies. Exceptions are raised.
    """

    def __init__(self, start=None, statuses=(), chunks=None):
        self.start_reply = start if start is not None else {"success": True, "id": "crawl-1"}
        self.statuses = list(statuses)
        self.chunks = dict(chunks or {})
        self.started = []
        self.status_calls = 0
        self.next_calls = []

    @staticmethod
    def _reply(item):
        if isinstance(item, Exception):
            raise item
        return item

    async def start_crawl(self, url, limit=50):
        self.started.append((url, limit))
        return self._reply(self.start_reply)

    async def crawl_status(self, job_id):
        self.status_calls += 1
        return self._reply(self.statuses[min(self.status_calls, len(self.statuses)) - 1])

    async def crawl_next(self, next_url):
        self.next_calls.append(next_url)
        return self._reply(self.chunks[next_url])


class RecordingSleep:
    """Clock that returns immediately and remembers every requested delay."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)
