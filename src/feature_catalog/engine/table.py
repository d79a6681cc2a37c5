"""Sorting and pagination for the feature explorer table."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Sequence

from feature_catalog.models import STRING_FIELDS, Feature


DEFAULT_PAGE_SIZE = 50
DEFAULT_SORT_KEY = "feature_name"
SORTABLE_FIELDS: tuple[str, ...] = ("id",) + STRING_FIELDS + ("shap_rank",)

ASCENDING = "asc"
DESCENDING = "desc"

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True, slots=True)
class SortState:
    key: str = DEFAULT_SORT_KEY
    direction: str = ASCENDING


@dataclass(frozen=True, slots=True)
class Page:
    items: tuple[Feature, ...]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total": self.total,
            "total_pages": self.total_pages,
            "items": [feature.as_dict() for feature in self.items],
        }


def _natural_key(value: Any) -> tuple[tuple[int, int | str], ...]:
    text = "" if value is None else str(value)
    parts = []
    for chunk in _DIGITS.split(text):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk.casefold()))
    return tuple(parts)


def _field_value(feature: Feature, key: str) -> Any:
    return getattr(feature, key)


def sort_features(features: Sequence[Feature], sort: SortState = SortState()) -> list[Feature]:
    """Sort features with numeric-aware ordering on ``sort.key``.

    Digit runs compare as numbers (``f2`` before ``f10``) and a missing value
    sorts as an empty string. The sort is stable.
    """

    if sort.key not in SORTABLE_FIELDS:
        raise ValueError(f"Unsupported sort field '{sort.key}'. Expected one of {SORTABLE_FIELDS}.")
    return sorted(
        features,
        key=lambda feature: _natural_key(_field_value(feature, sort.key)),
        reverse=sort.direction == DESCENDING,
    )


def next_sort(current: SortState, key: str) -> SortState:
    """Re-selecting the active column flips direction; a new column starts ascending."""

    if current.key == key:
        direction = DESCENDING if current.direction == ASCENDING else ASCENDING
        return SortState(key=key, direction=direction)
    return SortState(key=key, direction=ASCENDING)


def paginate(features: Sequence[Feature], page: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Return one zero-based page; pages past the end clamp to the last page."""

    if page_size < 1:
        raise ValueError("page_size must be at least 1.")
    total = len(features)
    last_page = max(math.ceil(total / page_size) - 1, 0)
    page = min(max(page, 0), last_page)
    start = page * page_size
    return Page(
        items=tuple(features[start : start + page_size]),
        page=page,
        page_size=page_size,
        total=total,
    )


__all__ = [
    "ASCENDING",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT_KEY",
    "DESCENDING",
    "Page",
    "SORTABLE_FIELDS",
    "SortState",
    "next_sort",
    "paginate",
    "sort_features",
]
