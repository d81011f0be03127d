"""HTTP client for the news aggregation REST API."""

import logging

import httpx

from .config import Config
from .models import Article, FetchResult, Options, Status

logger = logging.getLogger(__name__)

FALLBACK_ERROR = "Failed to fetch"


class NewsAPIClient:
    """Async client for the `/news`, `/filters` and `/status` endpoints.

    Designed for single-instance lifecycle: create once at startup and reuse
    for every request of the session.
    """

    def __init__(self, config: Config):
        self._config = config
        self.api_url = config.news_api_base.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=config.news_api_timeout,
            follow_redirects=True,
        )

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> object:
        """GET a path and decode its JSON body.

        The body is decoded whatever the HTTP status, since the backend reports
        failures as ``{"success": false, "error": ...}`` payloads.

        Raises:
            TransportError: If the request fails or the body is not JSON
        """
        url = f"{self.api_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"Network error: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid response from server (HTTP {response.status_code})"
            ) from e

    async def get_news(self, params: dict[str, str]) -> FetchResult:
        """Fetch one page of articles.

        Args:
            params: Query parameters as produced by ``build_query``

        Raises:
            TransportError: If the backend cannot be reached
            ApplicationError: If the backend reports failure or the payload is malformed
        """
        data = await self._get_json("/news", params)
        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("error") if isinstance(data, dict) else None
            raise ApplicationError(message or FALLBACK_ERROR)

        try:
            articles = tuple(Article.from_api(item) for item in data.get("articles") or [])
            total = int(data.get("total", len(articles)))
            total_pages = int(data.get("totalPages", 1))
        except (AttributeError, TypeError, ValueError) as e:
            raise ApplicationError(f"Malformed response from server: {e}") from e

        logger.info("Retrieved %d articles (%d total, %d pages)", len(articles), total, total_pages)
        return FetchResult(articles=articles, total=total, total_pages=total_pages)

    async def get_filters(self) -> Options:
        """Fetch the values available for each filter.

        Raises:
            OptionsLoadError: On any failure; callers treat this as non-fatal
        """
        try:
            data = await self._get_json("/filters")
        except TransportError as e:
            raise OptionsLoadError(str(e)) from e
        if not isinstance(data, dict) or not data.get("success"):
            raise OptionsLoadError("Filter options unavailable")

        try:
            return Options(
                languages=tuple(data.get("languages") or ()),
                countries=tuple(data.get("countries") or ()),
                categories=tuple(data.get("categories") or ()),
                datatypes=tuple(data.get("datatypes") or ()),
            )
        except TypeError as e:
            raise OptionsLoadError(f"Malformed filter options: {e}") from e

    async def get_status(self) -> Status:
        """Fetch the backend status summary.

        Raises:
            StatusLoadError: On any failure; callers treat this as non-fatal
        """
        try:
            data = await self._get_json("/status")
        except TransportError as e:
            raise StatusLoadError(str(e)) from e
        if not isinstance(data, dict) or not data.get("success"):
            raise StatusLoadError("Status unavailable")

        try:
            return Status(
                total_articles=int(data.get("totalArticles") or 0),
                latest_article=data.get("latestArticle") or "",
                db_status=data.get("dbStatus") or "unknown",
            )
        except (TypeError, ValueError) as e:
            raise StatusLoadError(f"Malformed status: {e}") from e

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()


class NewsAPIError(Exception):
    """Base class for errors talking to the news API."""


class TransportError(NewsAPIError):
    """Raised when the backend cannot be reached or returns an undecodable body."""


class ApplicationError(NewsAPIError):
    """Raised when the backend answers with ``success: false`` or a malformed payload."""


class OptionsLoadError(NewsAPIError):
    """Raised when filter options cannot be loaded."""


class StatusLoadError(NewsAPIError):
    """Raised when the backend status cannot be loaded."""
