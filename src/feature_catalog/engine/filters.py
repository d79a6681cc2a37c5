"""Multi-key filtering of the feature collection.

A :class:`FilterState` is an immutable value: every mutator returns a new
state and leaves its argument untouched, so callers can keep previous states
around for undo or comparison. Within one key the selected values are OR-ed;
across keys, the SHAP threshold and the search text, constraints are AND-ed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Sequence

from feature_catalog.models import FILTER_KEYS, Feature, FilterKey

from .grouping import distinct_sorted


def _empty_selections() -> dict[FilterKey, frozenset[str]]:
    return {key: frozenset() for key in FILTER_KEYS}


@dataclass(frozen=True)
class FilterState:
    """User-chosen constraints on the feature collection."""

    selections: Mapping[FilterKey, frozenset[str]] = field(default_factory=_empty_selections)
    shap_rank_max: float | None = None
    search: str = ""

    def __post_init__(self) -> None:
        normalized = _empty_selections()
        for key, values in self.selections.items():
            normalized[FilterKey(key)] = frozenset(values)
        object.__setattr__(self, "selections", normalized)

    def selected(self, key: FilterKey) -> frozenset[str]:
        return self.selections[key]

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_FILTERS

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {key.value: sorted(self.selections[key]) for key in FILTER_KEYS}
        payload["shap_rank_max"] = self.shap_rank_max
        payload["search"] = self.search
        return payload


EMPTY_FILTERS = FilterState()


def matches_filters(feature: Feature, filters: FilterState) -> bool:
    """Return ``True`` when ``feature`` satisfies every active constraint."""

    for key in FILTER_KEYS:
        selected = filters.selections[key]
        if selected and key.read(feature) not in selected:
            return False

    if filters.shap_rank_max is not None:
        if feature.shap_rank is None or feature.shap_rank > filters.shap_rank_max:
            return False

    if filters.search:
        needle = filters.search.lower()
        if needle not in feature.feature_name.lower() and needle not in feature.description.lower():
            return False

    return True


def apply_filters(features: Sequence[Feature], filters: FilterState) -> list[Feature]:
    """Return the features satisfying ``filters`` in their original order."""

    if filters.is_empty:
        return list(features)
    return [feature for feature in features if matches_filters(feature, filters)]


def toggle_filter(filters: FilterState, key: FilterKey, value: str) -> FilterState:
    """Add ``value`` to the selection for ``key``, or remove it when already selected."""

    key = FilterKey(key)
    current = filters.selections[key]
    updated = current - {value} if value in current else current | {value}
    selections = dict(filters.selections)
    selections[key] = updated
    return replace(filters, selections=selections)


def set_selection(filters: FilterState, key: FilterKey, values: Iterable[str]) -> FilterState:
    """Replace the whole selection for ``key``."""

    selections = dict(filters.selections)
    selections[FilterKey(key)] = frozenset(values)
    return replace(filters, selections=selections)


def set_search(filters: FilterState, search: str) -> FilterState:
    return replace(filters, search=search)


def set_shap_rank_max(filters: FilterState, shap_rank_max: float | None) -> FilterState:
    return replace(filters, shap_rank_max=shap_rank_max)


def clear_filter(filters: FilterState, key: FilterKey) -> FilterState:
    return set_selection(filters, key, ())


def clear_shap_filter(filters: FilterState) -> FilterState:
    return replace(filters, shap_rank_max=None)


def clear_all_filters() -> FilterState:
    """Return the initial, unconstrained state."""
    return EMPTY_FILTERS


def active_filter_count(filters: FilterState) -> int:
    """Number of active constraints, as shown on the filter badge."""

    count = sum(len(filters.selections[key]) for key in FILTER_KEYS)
    if filters.shap_rank_max is not None:
        count += 1
    if filters.search:
        count += 1
    return count


def filter_options(features: Sequence[Feature]) -> dict[FilterKey, list[str]]:
    """Distinct non-empty values per filter key, sorted for dropdowns."""

    return {key: distinct_sorted(features, key.read) for key in FILTER_KEYS}


__all__ = [
    "EMPTY_FILTERS",
    "FilterState",
    "active_filter_count",
    "apply_filters",
    "clear_all_filters",
    "clear_filter",
    "clear_shap_filter",
    "filter_options",
    "matches_filters",
    "set_search",
    "set_selection",
    "set_shap_rank_max",
    "toggle_filter",
]
