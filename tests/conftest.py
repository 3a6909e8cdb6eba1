"""
Shared fixtures for the DevDocs to LLM tests.

No test talks to the real Firecrawl API: the proxy routes run against a
FirecrawlClient whose transport replays canned provider replies.
"""

import pytest

from devdocs_llm.config import Settings
from devdocs_llm.firecrawl import FirecrawlClient
from devdocs_llm.crawler.models import PageResult
from devdocs_llm.web import create_app


FIRECRAWL_URL = "https://api.firecrawl.dev/v1"


class ReplayFirecrawlClient(FirecrawlClient):
    """FirecrawlClient that records requests and replays queued (status, body) replies."""

    def __init__(self, settings, replies=None):
        super().__init__(settings)
        self.replies = list(replies or [])
        self.calls = []

    def queue(self, status, body):
        self.replies.append((status, body))

    async def _request(self, method, url, payload=None):
        self.calls.append((method, url, payload))
        return self.replies.pop(0)


@pytest.fixture
def settings():
    return Settings(api_key="fc-test-key", api_url=FIRECRAWL_URL, timeout=5)


@pytest.fixture
def firecrawl(settings):
    return ReplayFirecrawlClient(settings)


@pytest.fixture
def app(settings, firecrawl):
    app = create_app(settings, firecrawl)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def pages():
    return [
        PageResult(url="https://docs.example.com/", content="# Welcome\n\nStart here."),
        PageResult(url="https://docs.example.com/install", content="Run `pip install example`."),
        PageResult(url="https://docs.example.com/api?v=2", content="- get\n- put\n"),
    ]
