"""Build `/news` query parameters from a filter state."""

from .filters import FilterState

PAGE_SIZE = 20


def _join(members: frozenset[str]) -> str:
    return ",".join(sorted(members))


def build_query(state: FilterState, page: int, page_size: int = PAGE_SIZE) -> dict[str, str]:
    """Map (filters, page, page size) to wire-ready query parameters.

    ``page`` and ``limit`` are always present. A filter key is included only
    when its field is set, so "no filter" is never sent as an empty string.
    Keys come out in a fixed order.
    """
    params: dict[str, str] = {"page": str(page), "limit": str(page_size)}

    if state.search:
        params["search"] = state.search
    if state.start_date is not None:
        params["startDate"] = state.start_date.isoformat()
    if state.end_date is not None:
        params["endDate"] = state.end_date.isoformat()
    if state.author:
        params["author"] = state.author
    if state.datatype:
        params["datatype"] = state.datatype
    if state.language:
        params["language"] = _join(state.language)
    if state.country:
        params["country"] = _join(state.country)
    if state.category:
        params["category"] = _join(state.category)

    return params
