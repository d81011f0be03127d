"""Tests for fetch.py — epochs, stale-response discard and debouncing."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from conftest import drain, make_result

from newsfeed_browser.client import ApplicationError, TransportError
from newsfeed_browser.fetch import FetchController

PAGE_1 = {"page": "1", "limit": "20"}
PAGE_2 = {"page": "2", "limit": "20"}


@pytest.mark.asyncio
async def test_issue_fetch_applies_result(controlled_client):
    seen = []
    controller = FetchController(controlled_client, on_result=seen.append)

    task = controller.fetch_now(PAGE_1)
    assert controller.loading is True
    assert controller.epoch == 1

    await drain()
    controlled_client.resolve(0, make_result("a", "b", total=40, total_pages=2))
    assert await task is True

    assert [a.title for a in controller.articles] == ["a", "b"]
    assert controller.total == 40
    assert controller.total_pages == 2
    assert controller.loading is False
    assert controller.error is None
    assert controller.has_loaded is True
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_stale_response_discarded(controlled_client):
    controller = FetchController(controlled_client)

    first = controller.fetch_now(PAGE_1)
    second = controller.fetch_now(PAGE_2)
    await drain()
    assert len(controlled_client.calls) == 2

    controlled_client.resolve(1, make_result("newer"))
    assert await second is True
    controlled_client.resolve(0, make_result("older"))
    assert await first is False

    assert [a.title for a in controller.articles] == ["newer"]
    assert controller.loading is False


@pytest.mark.asyncio
async def test_stale_response_does_not_clear_loading(controlled_client):
    controller = FetchController(controlled_client)

    first = controller.fetch_now(PAGE_1)
    controller.fetch_now(PAGE_2)
    await drain()

    controlled_client.resolve(0, make_result("older"))
    assert await first is False
    assert controller.loading is True
    assert controller.articles == ()


@pytest.mark.asyncio
async def test_stale_failure_discarded(controlled_client):
    controller = FetchController(controlled_client)

    first = controller.fetch_now(PAGE_1)
    second = controller.fetch_now(PAGE_2)
    await drain()

    controlled_client.resolve(1, make_result("ok"))
    await second
    controlled_client.fail(0, TransportError("Network error: reset"))
    assert await first is False
    assert controller.error is None


@pytest.mark.asyncio
async def test_failure_keeps_previous_articles(controlled_client):
    controller = FetchController(controlled_client)

    task = controller.fetch_now(PAGE_1)
    await drain()
    controlled_client.resolve(0, make_result("kept"))
    await task

    task = controller.fetch_now(PAGE_2)
    await drain()
    controlled_client.fail(1, ApplicationError("Database unavailable"))
    await task

    assert controller.error == "Database unavailable"
    assert controller.loading is False
    assert [a.title for a in controller.articles] == ["kept"]


@pytest.mark.asyncio
async def test_new_fetch_clears_error(controlled_client):
    controller = FetchController(controlled_client)
    task = controller.fetch_now(PAGE_1)
    await drain()
    controlled_client.fail(0, TransportError("down"))
    await task
    assert controller.error == "down"

    controller.fetch_now(PAGE_1)
    assert controller.error is None
    assert controller.loading is True


@pytest.mark.asyncio
async def test_awaitable_issue_fetch():
    client = AsyncMock()
    client.get_news = AsyncMock(return_value=make_result("x"))
    controller = FetchController(client)

    assert await controller.issue_fetch(PAGE_1) is True
    assert controller.articles[0].title == "x"


@pytest.mark.asyncio
async def test_debounce_coalesces_calls():
    client = AsyncMock()
    client.get_news = AsyncMock(return_value=make_result("x"))
    controller = FetchController(client, debounce_seconds=0.05)

    for n in range(3):
        controller.schedule(lambda n=n: {"page": "1", "limit": "20", "search": f"q{n}"})
        await asyncio.sleep(0.01)

    assert controller.debounce_pending is True
    assert client.get_news.await_count == 0

    await controller.wait_idle()

    assert client.get_news.await_count == 1
    assert client.get_news.call_args[0][0]["search"] == "q2"
    assert controller.debounce_pending is False


@pytest.mark.asyncio
async def test_params_evaluated_when_timer_fires():
    client = AsyncMock()
    client.get_news = AsyncMock(return_value=make_result())
    controller = FetchController(client, debounce_seconds=0.02)
    box = {"search": "before"}

    controller.schedule(lambda: {"page": "1", "limit": "20", "search": box["search"]})
    box["search"] = "after"
    await controller.wait_idle()

    assert client.get_news.call_args[0][0]["search"] == "after"


@pytest.mark.asyncio
async def test_cancel_pending():
    client = AsyncMock()
    client.get_news = AsyncMock(return_value=make_result())
    controller = FetchController(client, debounce_seconds=0.02)

    controller.schedule(lambda: PAGE_1)
    controller.cancel_pending()
    await asyncio.sleep(0.05)

    assert client.get_news.await_count == 0
    assert controller.debounce_pending is False


@pytest.mark.asyncio
async def test_aclose_cancels_in_flight(controlled_client):
    controller = FetchController(controlled_client, debounce_seconds=10)
    task = controller.fetch_now(PAGE_1)
    controller.schedule(lambda: PAGE_2)
    await drain()

    await controller.aclose()

    assert task.cancelled()
    assert controller.debounce_pending is False
    assert controller.in_flight == 0


@pytest.mark.asyncio
async def test_wait_idle_wakes_when_timer_cancelled():
    client = AsyncMock()
    client.get_news = AsyncMock(return_value=make_result())
    controller = FetchController(client, debounce_seconds=10)

    controller.schedule(lambda: PAGE_1)
    waiter = asyncio.create_task(controller.wait_idle())
    await drain()
    assert not waiter.done()

    controller.cancel_pending()
    await asyncio.wait_for(waiter, timeout=1)
    assert client.get_news.await_count == 0


@pytest.mark.asyncio
async def test_cancel_all_returns_cancelled_tasks(controlled_client):
    controller = FetchController(controlled_client, debounce_seconds=10)
    task = controller.fetch_now(PAGE_1)
    controller.schedule(lambda: PAGE_2)

    assert controller.cancel_all() == [task]
    assert controller.debounce_pending is False
    await drain()
    assert task.cancelled()
