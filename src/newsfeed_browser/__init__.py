"""News feed browser — filter-synchronized client for a news aggregation API."""

from .client import ApplicationError, NewsAPIClient, NewsAPIError, TransportError
from .engine import EngineState, NewsFeedEngine
from .filters import FilterState, InvalidFieldError
from .models import Article, FetchResult
from .query import build_query
from .server import main

__all__ = [
    "main",
    "NewsAPIClient",
    "NewsAPIError",
    "TransportError",
    "ApplicationError",
    "NewsFeedEngine",
    "EngineState",
    "FilterState",
    "InvalidFieldError",
    "Article",
    "FetchResult",
    "build_query",
]

__version__ = "0.1.0"
