"""MCP tool definitions for browsing the news feed.

The tools are the presentation layer: they call engine methods and read back
its state, never the API directly. All exceptions are caught at the tool
boundary and returned as "Error: ..." strings so the MCP protocol never sees
an uncaught exception.
"""

import logging

from fastmcp import FastMCP

from .engine import NewsFeedEngine

logger = logging.getLogger(__name__)


def _truncate_description(description: str, max_length: int) -> str:
    """Truncate description to max_length at a word boundary."""
    if len(description) <= max_length:
        return description
    return description[:max_length].rsplit(" ", 1)[0] + "..."


def register_tools(mcp: FastMCP, engine: NewsFeedEngine) -> None:
    """Register all news feed tools on the given MCP server instance."""

    @mcp.tool()
    async def get_news_feed(wait: bool = True, max_description_length: int = 300) -> str:
        """Get the current page of the news feed.

        Args:
            wait: Wait for pending filter edits and in-flight requests first (default True).
            max_description_length: Maximum characters for article descriptions (default 300).

        Returns the articles plus total, page, total_pages, page_window, loading,
        error, filters and active_tags.
        """
        try:
            await engine.start()
            if wait:
                await engine.settle()
            view = engine.snapshot().to_dict()
            del view["options"]
            for article in view["articles"]:
                description = article["description"] or article["content"]
                article["description"] = _truncate_description(description, max_description_length)
                del article["content"]
            return str(view)
        except Exception as e:
            logger.error("get_news_feed failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def set_filter(key: str, value: str | list[str]) -> str:
        """Replace one filter and refresh the feed from page 1.

        Args:
            key: One of search, startDate, endDate, author, datatype, language,
                country, category.
            value: New value. A list for language, country and category (the
                full new selection); a string otherwise. Empty clears the filter.

        Returns "OK" on success or an error message.
        """
        try:
            await engine.start()
            engine.on_filter_changed(key, value)
            return "OK"
        except Exception as e:
            logger.error("set_filter failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def toggle_filter(key: str, member: str) -> str:
        """Add or remove one value of a language, country or category filter.

        Returns "OK" on success or an error message.
        """
        try:
            await engine.start()
            engine.toggle_filter(key, member)
            return "OK"
        except Exception as e:
            logger.error("toggle_filter failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def remove_filter(key: str, value: str = "") -> str:
        """Remove one active filter tag.

        Args:
            key: Filter name.
            value: For language, country and category, the member to remove.

        Returns "OK" on success or an error message.
        """
        try:
            await engine.start()
            engine.remove_filter_tag(key, value)
            return "OK"
        except Exception as e:
            logger.error("remove_filter failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def reset_filters() -> str:
        """Clear every filter and refresh the feed from page 1."""
        try:
            await engine.start()
            engine.reset_filters()
            return "OK"
        except Exception as e:
            logger.error("reset_filters failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def go_to_page(page: int) -> str:
        """Jump to a page of the current results.

        Returns "OK", or an error if the page is outside 1..total_pages.
        """
        try:
            await engine.start()
            if not engine.on_page_changed(page):
                return f"Error: Page {page} out of range (1-{engine.pagination.total_pages})"
            return "OK"
        except Exception as e:
            logger.error("go_to_page failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def next_page() -> str:
        """Move to the next page of results."""
        try:
            await engine.start()
            if not engine.next_page():
                return "Error: Already on the last page"
            return "OK"
        except Exception as e:
            logger.error("next_page failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def previous_page() -> str:
        """Move to the previous page of results."""
        try:
            await engine.start()
            if not engine.previous_page():
                return "Error: Already on the first page"
            return "OK"
        except Exception as e:
            logger.error("previous_page failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def get_filter_options() -> str:
        """List the languages, countries, categories and datatypes available as filters."""
        try:
            await engine.start()
            return str(engine.options.to_dict())
        except Exception as e:
            logger.error("get_filter_options failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def get_status() -> str:
        """Get the backend status: article count, latest article date, database health."""
        try:
            await engine.start()
            if engine.status is None:
                return "Error: Status unavailable"
            return str(engine.status.to_dict())
        except Exception as e:
            logger.error("get_status failed: %s", e, exc_info=True)
            return f"Error: {e}"
