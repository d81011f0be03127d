"""Debounced and immediate fetching of the news feed.

FetchController owns the single "current" request. Every fetch allocates a new
epoch; a response whose epoch is no longer current is dropped, so responses
take effect in issue order rather than arrival order. The underlying HTTP
request is never aborted.
"""

import asyncio
import logging
from collections.abc import Callable

from .client import NewsAPIClient, NewsAPIError
from .models import Article, FetchResult

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.4

ParamsFactory = Callable[[], dict[str, str]]


class FetchController:
    """Issues `/news` requests and holds the last applied result."""

    def __init__(
        self,
        client: NewsAPIClient,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_result: Callable[[FetchResult], None] | None = None,
    ):
        self._client = client
        self._debounce_seconds = debounce_seconds
        self._on_result = on_result
        self._timer: asyncio.TimerHandle | None = None
        self._timer_idle = asyncio.Event()
        self._timer_idle.set()
        self._tasks: set[asyncio.Task] = set()

        self.epoch = 0
        self.articles: tuple[Article, ...] = ()
        self.total = 0
        self.total_pages = 1
        self.loading = False
        self.error: str | None = None
        self.has_loaded = False

    @property
    def debounce_pending(self) -> bool:
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def schedule(self, make_params: ParamsFactory) -> None:
        """(Re)start the debounce timer.

        Any pending timer is cancelled first, so only the last call within a
        quiet window results in a request. ``make_params`` is evaluated when the
        timer fires.
        """
        self.cancel_pending()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce_seconds, self._on_timer, make_params)
        self._timer_idle.clear()
        logger.debug("Debounce timer started (%.3fs)", self._debounce_seconds)

    def cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._timer_idle.set()
            logger.debug("Debounce timer cancelled")

    def _on_timer(self, make_params: ParamsFactory) -> None:
        self._timer = None
        self._timer_idle.set()
        self.fetch_now(make_params())

    def fetch_now(self, params: dict[str, str]) -> asyncio.Task:
        """Issue a fetch without delay; returns the task that completes it."""
        epoch = self._begin()
        task = asyncio.get_running_loop().create_task(self._complete(epoch, params))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def issue_fetch(self, params: dict[str, str]) -> bool:
        """Fetch and apply a page of results.

        Returns:
            True if the result (or failure) was applied, False if it was stale.
        """
        epoch = self._begin()
        return await self._complete(epoch, params)

    def _begin(self) -> int:
        self.epoch += 1
        self.loading = True
        self.error = None
        return self.epoch

    async def _complete(self, epoch: int, params: dict[str, str]) -> bool:
        try:
            result = await self._client.get_news(params)
        except NewsAPIError as e:
            if epoch != self.epoch:
                logger.debug("Discarding stale failure for epoch %d (current %d)", epoch, self.epoch)
                return False
            logger.warning("News fetch failed: %s", e)
            self.error = str(e)
            self.loading = False
            return True

        if epoch != self.epoch:
            logger.debug("Discarding stale result for epoch %d (current %d)", epoch, self.epoch)
            return False

        self.articles = result.articles
        self.total = result.total
        self.total_pages = result.total_pages
        self.loading = False
        self.error = None
        self.has_loaded = True
        if self._on_result is not None:
            self._on_result(result)
        return True

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no request is in flight."""
        while self._timer is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await self._timer_idle.wait()

    def cancel_all(self) -> list[asyncio.Task]:
        """Cancel the debounce timer and every in-flight fetch; returns the cancelled tasks."""
        self.cancel_pending()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        return tasks

    async def aclose(self) -> None:
        tasks = self.cancel_all()
        await asyncio.gather(*tasks, return_exceptions=True)
