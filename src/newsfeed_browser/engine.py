"""Orchestration of filters, pagination and fetching.

The presentation layer calls explicit methods on NewsFeedEngine:

* filter edits reset to page 1 and restart the debounce timer;
* page changes fetch immediately with the current filters; a filter debounce
  that is still pending fires afterwards and returns the feed to page 1.

It then reads everything it displays from ``snapshot()``.
"""

import asyncio
import enum
import logging

from .client import NewsAPIClient, OptionsLoadError, StatusLoadError
from .fetch import DEFAULT_DEBOUNCE_SECONDS, FetchController
from .filters import FIELD_NAMES, SET_FIELDS, FilterState
from .models import FeedView, FetchResult, Options, Status
from .pagination import PaginationCoordinator
from .query import PAGE_SIZE, build_query

logger = logging.getLogger(__name__)


class EngineState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class NewsFeedEngine:
    """Keeps the news feed in sync with the user's filters and page."""

    def __init__(
        self,
        client: NewsAPIClient,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self._client = client
        self.filters = FilterState()
        self.pagination = PaginationCoordinator()
        self.fetcher = FetchController(
            client,
            debounce_seconds=debounce_seconds,
            on_result=self._on_result,
        )
        self.options = Options()
        self.status: Status | None = None
        self._started = False

    # --- lifecycle ---

    async def start(self) -> None:
        """Load reference data and the first page. Safe to call repeatedly."""
        if self._started:
            return
        self._started = True
        self.fetcher.fetch_now(self._query(self.pagination.page))
        await asyncio.gather(self._load_options(), self._load_status())
        logger.info("News feed engine started")

    async def _load_options(self) -> None:
        try:
            self.options = await self._client.get_filters()
        except OptionsLoadError as e:
            logger.warning("Filter options unavailable: %s", e)

    async def _load_status(self) -> None:
        try:
            self.status = await self._client.get_status()
        except StatusLoadError as e:
            logger.warning("Backend status unavailable: %s", e)

    async def settle(self) -> None:
        """Wait for any pending debounce and in-flight fetch to finish."""
        await self.fetcher.wait_idle()

    def cancel_pending_work(self) -> None:
        """Cancel the debounce timer and in-flight fetches without awaiting them."""
        self.fetcher.cancel_all()

    async def aclose(self) -> None:
        await self.fetcher.aclose()
        await self._client.aclose()

    # --- filter edits ---

    def on_filter_changed(self, key: str, value: object) -> None:
        """Replace one filter field and schedule a debounced refetch at page 1."""
        self._apply_filters(self.filters.set_field(key, value))

    def toggle_filter(self, key: str, member: str) -> None:
        self._apply_filters(self.filters.toggle_set_member(key, member))

    def remove_filter_tag(self, key: str, value: str = "") -> None:
        self._apply_filters(self.filters.remove_tag(key, value))

    def reset_filters(self) -> None:
        self._apply_filters(FilterState.reset())

    def _apply_filters(self, filters: FilterState) -> None:
        self.filters = filters
        self.pagination.reset()
        self.fetcher.schedule(self._debounced_query)

    def _debounced_query(self) -> dict[str, str]:
        # A page change made while the timer was pending used the old page count.
        self.pagination.reset()
        return self._query(1)

    # --- paging ---

    def on_page_changed(self, page: int) -> bool:
        """Fetch ``page`` immediately. Out-of-range pages are rejected and return False."""
        if not self.pagination.go_to(page):
            return False
        self.fetcher.fetch_now(self._query(page))
        return True

    def next_page(self) -> bool:
        return self.on_page_changed(self.pagination.page + 1)

    def previous_page(self) -> bool:
        return self.on_page_changed(self.pagination.page - 1)

    def _query(self, page: int) -> dict[str, str]:
        return build_query(self.filters, page, PAGE_SIZE)

    def _on_result(self, result: FetchResult) -> None:
        self.pagination.update_total_pages(result.total_pages)
        logger.info(
            "Applied page %d/%d (%d articles)",
            self.pagination.page,
            self.pagination.total_pages,
            len(result.articles),
        )

    # --- render-facing state ---

    @property
    def state(self) -> EngineState:
        if self.fetcher.loading:
            return EngineState.LOADING
        if self.fetcher.error is not None:
            return EngineState.FAILED
        if self.fetcher.has_loaded:
            return EngineState.LOADED
        return EngineState.IDLE

    @property
    def debounce_pending(self) -> bool:
        return self.fetcher.debounce_pending

    def filters_dict(self) -> dict[str, object]:
        result: dict[str, object] = {}
        for wire, attr in FIELD_NAMES.items():
            value = getattr(self.filters, attr)
            if attr in SET_FIELDS:
                result[wire] = sorted(value)
            elif value is None:
                result[wire] = ""
            elif isinstance(value, str):
                result[wire] = value
            else:
                result[wire] = value.isoformat()
        return result

    def snapshot(self) -> FeedView:
        return FeedView(
            articles=self.fetcher.articles,
            total=self.fetcher.total,
            page=self.pagination.page,
            total_pages=self.pagination.total_pages,
            loading=self.fetcher.loading,
            error=self.fetcher.error,
            filters=self.filters_dict(),
            options=self.options,
            status=self.status,
            page_window=self.pagination.window(),
            has_prev=self.pagination.has_prev,
            has_next=self.pagination.has_next,
            active_tags=self.filters.active_tags(),
        )
