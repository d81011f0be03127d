"""Data models for the news feed API."""

from dataclasses import dataclass, field


def _str_list(value: object) -> tuple[str, ...]:
    """Normalize a server list field; tolerates null and a bare string."""
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Article:
    """Read-only projection of one article as served by `/news`."""

    id: str
    title: str
    description: str
    content: str
    image_url: str
    link: str
    pub_date: str
    creator: tuple[str, ...] = ()
    category: tuple[str, ...] = ()
    datatype: str = ""
    source_id: str = ""

    @classmethod
    def from_api(cls, item: dict) -> "Article":
        """Build an Article from a raw API item, with safe defaults for missing fields."""
        identity = item.get("_id") or item.get("article_id") or ""
        return cls(
            id=str(identity),
            title=item.get("title") or "",
            description=item.get("description") or "",
            content=item.get("content") or "",
            image_url=item.get("image_url") or "",
            link=item.get("link") or "",
            pub_date=item.get("pubDate") or "",
            creator=_str_list(item.get("creator")),
            category=_str_list(item.get("category")),
            datatype=item.get("datatype") or "",
            source_id=item.get("source_id") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "image_url": self.image_url,
            "link": self.link,
            "pub_date": self.pub_date,
            "creator": list(self.creator),
            "category": list(self.category),
            "datatype": self.datatype,
            "source_id": self.source_id,
        }


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one successful `/news` request."""

    articles: tuple[Article, ...]
    total: int
    total_pages: int


@dataclass(frozen=True)
class Options:
    """Values available for selection in each filter, loaded once per session."""

    languages: tuple[str, ...] = ()
    countries: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    datatypes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "languages": list(self.languages),
            "countries": list(self.countries),
            "categories": list(self.categories),
            "datatypes": list(self.datatypes),
        }


@dataclass(frozen=True)
class Status:
    """Backend health summary, loaded once per session."""

    total_articles: int
    latest_article: str
    db_status: str

    @property
    def healthy(self) -> bool:
        return self.db_status == "connected"

    def to_dict(self) -> dict:
        return {
            "total_articles": self.total_articles,
            "latest_article": self.latest_article,
            "db_status": self.db_status,
            "healthy": self.healthy,
        }


@dataclass
class FeedView:
    """Everything the presentation layer reads; it issues no requests of its own."""

    articles: tuple[Article, ...]
    total: int
    page: int
    total_pages: int
    loading: bool
    error: str | None
    filters: dict[str, object]
    options: Options
    status: Status | None
    page_window: list[int | str] = field(default_factory=list)
    has_prev: bool = False
    has_next: bool = False
    active_tags: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "articles": [a.to_dict() for a in self.articles],
            "total": self.total,
            "page": self.page,
            "total_pages": self.total_pages,
            "loading": self.loading,
            "error": self.error,
            "filters": self.filters,
            "options": self.options.to_dict(),
            "status": self.status.to_dict() if self.status else None,
            "page_window": self.page_window,
            "has_prev": self.has_prev,
            "has_next": self.has_next,
            "active_tags": [list(t) for t in self.active_tags],
        }
