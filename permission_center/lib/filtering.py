"""Search filtering for the application list."""
from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class HasAppId(Protocol):
    app_id: str


def matches(query: str, identifier: str) -> bool:
    """Case-insensitive substring match; an empty query matches everything."""
    if not query:
        return True
    return query.lower() in identifier.lower()


def make_row_filter(get_query: Callable[[], str]) -> Callable[[HasAppId], bool]:
    """Filter function for `ApplicationList.set_filter_func` that reads the live query."""

    def _filter(row: HasAppId) -> bool:
        return matches(get_query(), row.app_id)

    return _filter
