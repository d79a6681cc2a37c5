"""Dimension x category matrices backing the coverage heatmaps."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from feature_catalog.models import UNKNOWN_LABEL, Feature, FilterKey, label_or_unknown
from feature_catalog.ref.framework import CATEGORY_ORDER, GEO_ORDER

from .grouping import order_by_count, share


DEFAULT_GAP_THRESHOLD = 10


class RowDimension(str, Enum):
    GEO = "geo"
    MODEL_NAME = "model_name"
    PRODUCT_BUSINESS = "product_business"

    @property
    def label(self) -> str:
        return DIMENSION_LABELS[self]


DIMENSION_LABELS: dict[RowDimension, str] = {
    RowDimension.GEO: "Geography",
    RowDimension.MODEL_NAME: "Model",
    RowDimension.PRODUCT_BUSINESS: "Product",
}


@dataclass(frozen=True, slots=True, order=True)
class RowKey:
    """Identifies a matrix row.

    Model rows carry the full ``(geo, product, model)`` context because model
    names repeat across markets; other dimensions only fill ``value``.
    """

    value: str
    geo: str = ""
    product: str = ""

    @property
    def label(self) -> str:
        if self.geo or self.product:
            return f"{self.geo} | {self.product} | {self.value}"
        return self.value

    def as_dict(self) -> dict[str, str]:
        if self.geo or self.product:
            return {"geo": self.geo, "product": self.product, "model": self.value}
        return {"value": self.value}


@dataclass(frozen=True, slots=True)
class MatrixRow:
    key: RowKey
    cells: dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.cells.values())


@dataclass(frozen=True, slots=True)
class CrossTabMatrix:
    """Counts of features per row key and primary category."""

    dimension: str
    categories: tuple[str, ...]
    rows: tuple[MatrixRow, ...]
    max_count: int

    @property
    def column_totals(self) -> dict[str, int]:
        return {
            category: sum(row.cells[category] for row in self.rows) for category in self.categories
        }

    @property
    def grand_total(self) -> int:
        return sum(row.total for row in self.rows)

    def cell(self, key: RowKey | str, category: str) -> int:
        lookup = key if isinstance(key, RowKey) else RowKey(key)
        for row in self.rows:
            if row.key == lookup:
                return row.cells.get(category, 0)
        return 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "dimension": self.dimension,
            "categories": list(self.categories),
            "rows": [
                {**row.key.as_dict(), "cells": dict(row.cells), "total": row.total}
                for row in self.rows
            ],
            "column_totals": self.column_totals,
            "max_count": self.max_count,
        }


@dataclass(frozen=True, slots=True)
class CoverageGap:
    geo: str
    category: str
    count: int


def _row_key(feature: Feature, dimension: RowDimension) -> RowKey:
    if dimension is RowDimension.MODEL_NAME:
        return RowKey(
            value=label_or_unknown(feature.model_name),
            geo=label_or_unknown(feature.geo),
            product=label_or_unknown(feature.product_business),
        )
    if dimension is RowDimension.GEO:
        return RowKey(label_or_unknown(feature.geo))
    return RowKey(label_or_unknown(feature.product_business))


def _row_sort_key(key: RowKey) -> tuple[str, str, str]:
    return (key.geo, key.product, key.value)


def build_matrix(features: Sequence[Feature], dimension: RowDimension | str) -> CrossTabMatrix:
    """Cross-tabulate ``features`` by ``dimension`` and primary category.

    Rows and columns are the distinct values present in ``features``, sorted
    lexicographically (model rows by geo, product, then model). Unset values
    fall under ``Unknown`` so every feature lands in exactly one cell.
    """

    dimension = RowDimension(dimension)
    counts: Counter[tuple[RowKey, str]] = Counter()
    for feature in features:
        counts[(_row_key(feature, dimension), label_or_unknown(feature.primary_category))] += 1

    row_keys = sorted({key for key, _ in counts}, key=_row_sort_key)
    categories = tuple(sorted({category for _, category in counts}))

    rows = tuple(
        MatrixRow(key=key, cells={category: counts[(key, category)] for category in categories})
        for key in row_keys
    )
    return CrossTabMatrix(
        dimension=dimension.value,
        categories=categories,
        rows=rows,
        max_count=max(counts.values(), default=0) or 1,
    )


def build_geo_matrix(
    features: Sequence[Feature],
    *,
    geos: Sequence[str] = GEO_ORDER,
    categories: Sequence[str] = CATEGORY_ORDER,
) -> CrossTabMatrix:
    """Geography x category matrix over the canonical orders.

    Every configured pair is present, zero when no feature matches. Features
    outside the canonical geographies or categories are not counted.
    """

    cells: dict[str, dict[str, int]] = {geo: {category: 0 for category in categories} for geo in geos}
    for feature in features:
        row = cells.get(feature.geo)
        if row is not None and feature.primary_category in row:
            row[feature.primary_category] += 1

    rows = tuple(MatrixRow(key=RowKey(geo), cells=cells[geo]) for geo in geos)
    max_count = max((count for row in rows for count in row.cells.values()), default=0)
    return CrossTabMatrix(
        dimension=RowDimension.GEO.value,
        categories=tuple(categories),
        rows=rows,
        max_count=max(max_count, 1),
    )


def find_coverage_gaps(
    matrix: CrossTabMatrix, *, threshold: int = DEFAULT_GAP_THRESHOLD
) -> list[CoverageGap]:
    """Cells holding fewer than ``threshold`` features, smallest first."""

    gaps = [
        CoverageGap(geo=row.key.value, category=category, count=count)
        for row in matrix.rows
        for category, count in row.cells.items()
        if count < threshold
    ]
    return sorted(gaps, key=lambda gap: gap.count)


def heat_ratio(count: int, max_count: int) -> float:
    """Cell intensity in ``[0, 1]`` relative to the matrix maximum."""

    if count <= 0:
        return 0.0
    return min(1.0, count / max(max_count, 1))


def heat_tier(count: int, max_count: int) -> int:
    """Bucket a cell into one of the five colour tiers.

    ``0`` for empty cells, then ``4`` for ratios of at least 0.7, ``3`` above
    0.4, ``2`` above 0.2 and ``1`` otherwise.
    """

    if count <= 0:
        return 0
    ratio = heat_ratio(count, max_count)
    if ratio >= 0.7:
        return 4
    if ratio > 0.4:
        return 3
    if ratio > 0.2:
        return 2
    return 1


def row_composition(row: MatrixRow) -> dict[str, float]:
    """Percentage share of each non-empty category within one row."""

    total = row.total
    return {category: share(count, total) for category, count in row.cells.items() if count}


def category_type_breakdown(features: Sequence[Feature]) -> dict[str, list[tuple[str, int]]]:
    """Feature types under each primary category, largest first."""

    breakdown: dict[str, Counter[str]] = {}
    for feature in features:
        if not feature.primary_category or not feature.feature_type:
            continue
        breakdown.setdefault(feature.primary_category, Counter())[feature.feature_type] += 1
    return {category: order_by_count(counts) for category, counts in sorted(breakdown.items())}


def drilldown_filters(matrix: CrossTabMatrix, key: RowKey, category: str) -> list[tuple[FilterKey, str]]:
    """Filter selections that reproduce one matrix cell in the explorer.

    An ``Unknown`` row or column also selects the empty value, since matrices
    group unset fields under that label.
    """

    if matrix.dimension == RowDimension.MODEL_NAME.value:
        pairs = [
            (FilterKey.GEO, key.geo),
            (FilterKey.PRODUCT_BUSINESS, key.product),
            (FilterKey.MODEL_NAME, key.value),
        ]
    else:
        pairs = [(FilterKey(matrix.dimension), key.value)]
    pairs.append((FilterKey.PRIMARY_CATEGORY, category))

    selections: list[tuple[FilterKey, str]] = []
    for filter_key, value in pairs:
        selections.append((filter_key, value))
        if value == UNKNOWN_LABEL:
            selections.append((filter_key, ""))
    return selections


__all__ = [
    "CoverageGap",
    "CrossTabMatrix",
    "DEFAULT_GAP_THRESHOLD",
    "DIMENSION_LABELS",
    "MatrixRow",
    "RowDimension",
    "RowKey",
    "build_geo_matrix",
    "build_matrix",
    "category_type_breakdown",
    "drilldown_filters",
    "find_coverage_gaps",
    "heat_ratio",
    "heat_tier",
    "row_composition",
]
