"""Filter state for the news feed.

A FilterState is never mutated in place: every edit returns a new instance,
so two states with the same field values compare equal and produce the same
request.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, fields, replace
from datetime import date

# Wire name -> attribute name, in declaration order.
FIELD_NAMES: dict[str, str] = {
    "search": "search",
    "startDate": "start_date",
    "endDate": "end_date",
    "author": "author",
    "language": "language",
    "country": "country",
    "category": "category",
    "datatype": "datatype",
}

SET_FIELDS = frozenset({"language", "country", "category"})
DATE_FIELDS = frozenset({"start_date", "end_date"})

_ATTR_TO_WIRE = {attr: wire for wire, attr in FIELD_NAMES.items()}


class InvalidFieldError(ValueError):
    """Raised when a filter mutation names an unknown field or carries a bad value."""


def _resolve(key: str) -> str:
    """Map a wire or attribute name to the attribute name."""
    if key in FIELD_NAMES:
        return FIELD_NAMES[key]
    if key in _ATTR_TO_WIRE:
        return key
    raise InvalidFieldError(f"Unknown filter field: {key!r}")


def _coerce_date(key: str, value: object) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise InvalidFieldError(f"Invalid date for {key}: {value!r}") from e
    raise InvalidFieldError(f"Invalid date for {key}: {value!r}")


def _coerce_set(key: str, value: object) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidFieldError(f"{key} expects a collection of strings, got {value!r}")
    members = frozenset(value)
    if not all(isinstance(m, str) for m in members):
        raise InvalidFieldError(f"{key} members must be strings")
    return frozenset(m for m in members if m)


def _check_member(key: str, member: object) -> str:
    if not isinstance(member, str) or not member:
        raise InvalidFieldError(f"{key} member must be a non-empty string, got {member!r}")
    return member


def _coerce_str(key: str, value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidFieldError(f"{key} expects a string, got {value!r}")
    return value


@dataclass(frozen=True)
class FilterState:
    """All active search/filter criteria."""

    search: str = ""
    start_date: date | None = None
    end_date: date | None = None
    author: str = ""
    language: frozenset[str] = field(default_factory=frozenset)
    country: frozenset[str] = field(default_factory=frozenset)
    category: frozenset[str] = field(default_factory=frozenset)
    datatype: str = ""

    def set_field(self, key: str, value: object) -> "FilterState":
        """Return a copy with one field replaced.

        For set-valued fields ``value`` is the complete new set, not a delta.

        Raises:
            InvalidFieldError: If ``key`` is not a filter field or ``value``
                has the wrong shape for it.
        """
        attr = _resolve(key)
        if attr in SET_FIELDS:
            coerced: object = _coerce_set(key, value)
        elif attr in DATE_FIELDS:
            coerced = _coerce_date(key, value)
        else:
            coerced = _coerce_str(key, value)
        return replace(self, **{attr: coerced})

    def toggle_set_member(self, key: str, member: str) -> "FilterState":
        """Add ``member`` to a set-valued field if absent, remove it if present."""
        attr = _resolve(key)
        if attr not in SET_FIELDS:
            raise InvalidFieldError(f"{key} is not a multi-value filter")
        member = _check_member(key, member)
        current: frozenset[str] = getattr(self, attr)
        if member in current:
            return replace(self, **{attr: current - {member}})
        return replace(self, **{attr: current | {member}})

    def remove_tag(self, key: str, value: str = "") -> "FilterState":
        """Drop one active-filter tag: clear a scalar field or remove a set member."""
        attr = _resolve(key)
        if attr in SET_FIELDS:
            value = _check_member(key, value)
            current: frozenset[str] = getattr(self, attr)
            return replace(self, **{attr: current - {value}})
        return replace(self, **{attr: None if attr in DATE_FIELDS else ""})

    @staticmethod
    def reset() -> "FilterState":
        """Return the canonical default state."""
        return FilterState()

    def active_tags(self) -> list[tuple[str, str]]:
        """List ``(wire key, value)`` pairs for every active criterion."""
        tags: list[tuple[str, str]] = []
        for f in fields(self):
            value = getattr(self, f.name)
            wire = _ATTR_TO_WIRE[f.name]
            if f.name in SET_FIELDS:
                tags.extend((wire, member) for member in sorted(value))
            elif f.name in DATE_FIELDS:
                if value is not None:
                    tags.append((wire, value.isoformat()))
            elif value:
                tags.append((wire, value))
        return tags

    def is_default(self) -> bool:
        return self == FilterState()
