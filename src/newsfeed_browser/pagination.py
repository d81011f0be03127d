"""Pagination state and page-window computation."""

import logging

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
WINDOW_RADIUS = 2


def page_window(page: int, total_pages: int, radius: int = WINDOW_RADIUS) -> list[int | str]:
    """Return the page buttons to display around ``page``.

    A contiguous run of ``radius`` pages either side of the current page,
    clipped to ``[1, total_pages]``, plus the first and last pages when the run
    does not reach them. ``ELLIPSIS`` marks a gap of more than one page.
    """
    total_pages = max(1, total_pages)
    page = min(max(1, page), total_pages)
    start = max(1, page - radius)
    end = min(total_pages, page + radius)

    window: list[int | str] = []
    if start > 1:
        window.append(1)
    if start > 2:
        window.append(ELLIPSIS)
    window.extend(range(start, end + 1))
    if end < total_pages - 1:
        window.append(ELLIPSIS)
    if end < total_pages:
        window.append(total_pages)
    return window


class PaginationCoordinator:
    """Current page and page count; out-of-range moves are rejected, not clamped."""

    def __init__(self) -> None:
        self.page = 1
        self.total_pages = 1

    def reset(self) -> None:
        self.page = 1

    def can_go_to(self, page: int) -> bool:
        return 1 <= page <= self.total_pages

    def go_to(self, page: int) -> bool:
        """Move to ``page``. Returns False, leaving the page unchanged, when out of range."""
        if not self.can_go_to(page):
            logger.debug("Rejected page %d (valid range 1-%d)", page, self.total_pages)
            return False
        self.page = page
        return True

    def update_total_pages(self, total_pages: int) -> None:
        self.total_pages = max(1, total_pages)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def window(self) -> list[int | str]:
        return page_window(self.page, self.total_pages)
