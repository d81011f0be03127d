"""Shared fixtures: a fake API client whose responses the test releases by hand."""

import asyncio

import pytest

from newsfeed_browser.models import Article, FetchResult, Options, Status


def make_result(*titles: str, total: int | None = None, total_pages: int = 1) -> FetchResult:
    articles = tuple(Article.from_api({"_id": t, "title": t}) for t in titles)
    return FetchResult(
        articles=articles,
        total=len(articles) if total is None else total,
        total_pages=total_pages,
    )


class ControlledClient:
    """Records each `/news` call and blocks it until the test resolves it."""

    def __init__(self):
        self.calls: list[dict[str, str]] = []
        self.pending: list[asyncio.Future] = []
        self.options = Options(languages=("en", "fr"), categories=("tech",))
        self.status = Status(total_articles=100, latest_article="2024-03-01", db_status="connected")
        self.closed = False

    async def get_news(self, params):
        future = asyncio.get_running_loop().create_future()
        self.calls.append(params)
        self.pending.append(future)
        return await future

    async def get_filters(self):
        return self.options

    async def get_status(self):
        return self.status

    async def aclose(self):
        self.closed = True

    def resolve(self, index: int, result: FetchResult) -> None:
        self.pending[index].set_result(result)

    def fail(self, index: int, error: Exception) -> None:
        self.pending[index].set_exception(error)


async def drain(rounds: int = 5) -> None:
    """Let freshly created tasks run up to their first await."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def controlled_client():
    return ControlledClient()
