"""Counting and ordering helpers shared by the engine modules."""

from __future__ import annotations

import math
from collections import Counter
from typing import Callable, Iterable, Mapping

from feature_catalog.models import Feature, label_or_unknown

Accessor = Callable[[Feature], str]


def order_by_count(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """Return ``(name, count)`` pairs by descending count, then ascending name."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def count_by(features: Iterable[Feature], accessor: Accessor, *, keep_unset: bool = True) -> Counter[str]:
    """Count features per accessor value.

    Unset values are grouped under the ``Unknown`` label when ``keep_unset``
    is true and skipped otherwise.
    """

    counts: Counter[str] = Counter()
    for feature in features:
        value = accessor(feature)
        if value:
            counts[value] += 1
        elif keep_unset:
            counts[label_or_unknown(value)] += 1
    return counts


def partition_by(features: Iterable[Feature], accessor: Accessor) -> dict[str, list[Feature]]:
    """Split features into groups keyed by accessor value, preserving input order."""

    groups: dict[str, list[Feature]] = {}
    for feature in features:
        groups.setdefault(label_or_unknown(accessor(feature)), []).append(feature)
    return groups


def distinct_sorted(features: Iterable[Feature], accessor: Accessor) -> list[str]:
    """Distinct non-empty accessor values in ascending order."""
    return sorted({value for value in (accessor(feature) for feature in features) if value})


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def percentage(count: int, total: int) -> int:
    """Whole-number share of ``count`` in ``total``; zero when ``total`` is zero."""
    if total <= 0:
        return 0
    return round_half_up(count / total * 100)


def share(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total * 100


__all__ = [
    "Accessor",
    "count_by",
    "distinct_sorted",
    "order_by_count",
    "partition_by",
    "percentage",
    "round_half_up",
    "share",
]
