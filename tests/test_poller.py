"""
Poll-and-aggregate loop tests.

The loop runs against a scripted API and a recording clock, so a two
minute timeout scenario completes instantly.
"""

import asyncio

import pytest

from devdocs_llm.crawler import CrawlPoller, CrawlState, CrawlStatus
from devdocs_llm.crawler.models import compute_progress
from devdocs_llm.errors import (
    CrawlError,
    CrawlTimeoutError,
    InvalidResponseError,
    JobFailedError,
    UpstreamError,
)

from .fakes import RecordingSleep, ScriptedApi, provider_page


def make_poller(api, **kwargs):
    sleep = RecordingSleep()
    return CrawlPoller(api, sleep=sleep, **kwargs), sleep


def test_times_out_after_sixty_attempts():
    api = ScriptedApi(statuses=[{"status": "processing", "total": 10, "completed": 1}])
    poller, sleep = make_poller(api)

    with pytest.raises(CrawlTimeoutError) as excinfo:
        asyncio.run(poller.run("https://docs.example.com"))

    assert str(excinfo.value) == "Crawl timed out - please try again"
    assert api.status_calls == 60
    assert sleep.calls == [2.0] * 60
    assert poller.job.state == CrawlState.TIMED_OUT
    assert poller.job.attempts == 60


def test_start_without_id_fails_without_polling():
    api = ScriptedApi(start={"success": True})
    poller, sleep = make_poller(api)

    with pytest.raises(InvalidResponseError) as excinfo:
        asyncio.run(poller.run("https://docs.example.com"))

    assert str(excinfo.value) == "Invalid response from crawl endpoint"
    assert api.status_calls == 0
    assert sleep.calls == []
    assert poller.job.state == CrawlState.FAILED


def test_rejected_start_surfaces_proxy_message():
    api = ScriptedApi(start=UpstreamError("URL is required", 400, {"error": "URL is required"}))
    poller, _ = make_poller(api)

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(poller.run(""))

    assert excinfo.value.message == "URL is required"


def test_failed_job_reports_provider_reason():
    api = ScriptedApi(statuses=[
        {"status": "scraping", "total": 3, "completed": 1},
        UpstreamError("Site blocked", 500, {"status": "failed", "error": "Site blocked"}),
    ])
    poller, sleep = make_poller(api)

    with pytest.raises(JobFailedError) as excinfo:
        asyncio.run(poller.run("https://docs.example.com"))

    assert excinfo.value.message == "Site blocked"
    assert len(sleep.calls) == 2
    assert poller.job.state == CrawlState.FAILED


def test_status_http_failure_is_a_crawl_error():
    api = ScriptedApi(statuses=[UpstreamError("Bad gateway", 502, {})])
    poller, _ = make_poller(api)

    with pytest.raises(CrawlError) as excinfo:
        asyncio.run(poller.run("https://docs.example.com"))

    assert type(excinfo.value) is CrawlError
    assert excinfo.value.message == "Failed to check crawl status"


def test_unknown_status_keeps_polling():
    api = ScriptedApi(statuses=[
        {"status": "queued-somewhere"},
        {"status": "completed", "total": 1, "completed": 1,
         "data": [provider_page("https://docs.example.com")]},
    ])
    poller, _ = make_poller(api)

    pages = asyncio.run(poller.run("https://docs.example.com"))

    assert [page.url for page in pages] == ["https://docs.example.com"]
    assert api.status_calls == 2


def test_follows_pagination_in_cursor_order():
    api = ScriptedApi(
        statuses=[{
            "status": "completed", "total": 3, "completed": 1,
            "data": [provider_page("https://docs.example.com/1")],
            "next": "cursor-1",
        }],
        chunks={
            "cursor-1": {"status": "completed", "total": 3, "completed": 2,
                         "data": [provider_page("https://docs.example.com/2")], "next": "cursor-2"},
            "cursor-2": {"status": "completed", "total": 3, "completed": 3,
                         "data": [provider_page("https://docs.example.com/3")]},
        },
    )
    poller, _ = make_poller(api)

    pages = asyncio.run(poller.run("https://docs.example.com"))

    assert [page.url for page in pages] == [
        "https://docs.example.com/1",
        "https://docs.example.com/2",
        "https://docs.example.com/3",
    ]
    assert api.next_calls == ["cursor-1", "cursor-2"]
    assert poller.job.progress == 100
    assert poller.job.state == CrawlState.COMPLETED


def test_failed_chunk_stops_pagination_and_keeps_pages():
    api = ScriptedApi(
        statuses=[{
            "status": "completed", "total": 2, "completed": 2,
            "data": [provider_page("https://docs.example.com/1")],
            "next": "cursor-1",
        }],
        chunks={"cursor-1": UpstreamError("Failed to fetch next chunk", 500)},
    )
    poller, _ = make_poller(api)

    pages = asyncio.run(poller.run("https://docs.example.com"))

    assert [page.url for page in pages] == ["https://docs.example.com/1"]
    assert poller.job.state == CrawlState.COMPLETED


def test_pages_without_url_or_markdown_are_dropped():
    api = ScriptedApi(statuses=[{
        "status": "completed", "total": 3, "completed": 3,
        "data": [
            provider_page("https://docs.example.com/kept", "# Kept"),
            {"markdown": "no metadata"},
            provider_page("https://docs.example.com/empty", ""),
        ],
    }])
    poller, _ = make_poller(api)

    pages = asyncio.run(poller.run("https://docs.example.com"))

    assert [(page.url, page.content) for page in pages] == [("https://docs.example.com/kept", "# Kept")]


def test_progress_and_states_are_reported():
    seen = []
    api = ScriptedApi(statuses=[
        {"status": "scraping", "total": 8, "completed": 2},
        {"status": "scraping", "total": 8, "completed": 0},
        {"status": "completed", "total": 8, "completed": 8, "data": [], "next": "cursor-1"},
    ], chunks={"cursor-1": {"status": "completed", "data": []}})
    poller = CrawlPoller(
        api,
        sleep=RecordingSleep(),
        on_progress=lambda job: seen.append((job.state, job.progress)),
    )

    asyncio.run(poller.run("https://docs.example.com"))

    states = [state for state, _ in seen]
    assert states[0] == CrawlState.STARTING
    assert CrawlState.POLLING in states
    assert CrawlState.FETCHING_NEXT_PAGE in states
    assert states[-1] == CrawlState.COMPLETED
    progress = [value for state, value in seen if state == CrawlState.POLLING]
    assert 25 in progress
    assert progress[-1] == 100


def test_custom_interval_and_ceiling():
    api = ScriptedApi(statuses=[{"status": "processing"}])
    poller, sleep = make_poller(api, poll_interval=0.5, max_attempts=3)

    with pytest.raises(CrawlTimeoutError):
        asyncio.run(poller.run("https://docs.example.com"))

    assert sleep.calls == [0.5, 0.5, 0.5]


def test_progress_rounds_half_up():
    assert compute_progress(1, 8) == 13
    assert compute_progress(1, 3) == 33
    assert compute_progress(3, 8) == 38


def test_job_progress_uses_half_up_rounding():
    api = ScriptedApi(statuses=[{"status": "scraping", "total": 8, "completed": 1}])
    poller, _ = make_poller(api, max_attempts=1)

    with pytest.raises(CrawlTimeoutError):
        asyncio.run(poller.run("https://docs.example.com"))

    assert poller.job.progress == 13


def test_queued_status_is_not_in_progress():
    assert not CrawlStatus.QUEUED.in_progress
    assert CrawlStatus.SCRAPING.in_progress
    assert CrawlStatus.PROCESSING.in_progress


def test_start_with_non_string_id_fails_without_polling():
    api = ScriptedApi(start={"success": True, "id": 123})
    poller, sleep = make_poller(api)

    with pytest.raises(InvalidResponseError):
        asyncio.run(poller.run("https://docs.example.com"))

    assert api.status_calls == 0
    assert sleep.calls == []
