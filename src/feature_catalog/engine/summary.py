"""KPIs, category distribution and the four-level taxonomy summary tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from feature_catalog.models import UNKNOWN_LABEL, Feature, FilterKey
from feature_catalog.ref.framework import category_color

from .grouping import Accessor, count_by, distinct_sorted, order_by_count, partition_by, percentage, share


SUMMARY_LEVELS: tuple[Accessor, ...] = (
    FilterKey.PRIMARY_CATEGORY.read,
    FilterKey.FEATURE_TYPE.read,
    FilterKey.FEATURE_SUBTYPE.read,
    FilterKey.FEATURE_L3.read,
)


@dataclass(frozen=True, slots=True)
class Kpis:
    total: int
    models: int
    geos: int
    categories: int
    top_pct: int

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "models": self.models,
            "geos": self.geos,
            "categories": self.categories,
            "top_pct": self.top_pct,
        }


@dataclass(frozen=True, slots=True)
class CategoryShare:
    name: str
    count: int
    pct: float
    color: str


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    name: str
    color: str
    total: int
    by_geo: tuple[tuple[str, int], ...]
    by_model: tuple[tuple[str, int], ...]
    by_product: tuple[tuple[str, int], ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "total": self.total,
            "by_geo": [{"name": name, "count": count} for name, count in self.by_geo],
            "by_model": [{"name": name, "count": count} for name, count in self.by_model],
            "by_product": [{"name": name, "count": count} for name, count in self.by_product],
        }


@dataclass(frozen=True, slots=True)
class SummaryNode:
    name: str
    count: int
    pct: float
    by_geo: dict[str, int]
    by_product: dict[str, int]
    color: str | None = None
    children: tuple["SummaryNode", ...] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "count": self.count,
            "pct": self.pct,
            "by_geo": dict(self.by_geo),
            "by_product": dict(self.by_product),
        }
        if self.color is not None:
            payload["color"] = self.color
        if self.children is not None:
            payload["children"] = [child.as_dict() for child in self.children]
        return payload


@dataclass(frozen=True, slots=True)
class SummaryStructures:
    kpis: Kpis
    category_bar: tuple[CategoryShare, ...] = ()
    category_breakdowns: dict[str, CategoryBreakdown] = field(default_factory=dict)
    tree: tuple[SummaryNode, ...] = ()
    all_geos: tuple[str, ...] = ()
    all_products: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "kpis": self.kpis.as_dict(),
            "category_bar": [
                {"name": item.name, "count": item.count, "pct": item.pct, "color": item.color}
                for item in self.category_bar
            ],
            "category_breakdowns": {
                name: breakdown.as_dict() for name, breakdown in self.category_breakdowns.items()
            },
            "tree": [node.as_dict() for node in self.tree],
            "all_geos": list(self.all_geos),
            "all_products": list(self.all_products),
        }


def compute_kpis(features: Sequence[Feature]) -> Kpis:
    top_ranked = sum(1 for feature in features if feature.top_20_50)
    return Kpis(
        total=len(features),
        models=len(distinct_sorted(features, FilterKey.MODEL_NAME.read)),
        geos=len(distinct_sorted(features, FilterKey.GEO.read)),
        categories=len(distinct_sorted(features, FilterKey.PRIMARY_CATEGORY.read)),
        top_pct=percentage(top_ranked, len(features)),
    )


def category_distribution(features: Sequence[Feature]) -> tuple[CategoryShare, ...]:
    counts = count_by(features, FilterKey.PRIMARY_CATEGORY.read, keep_unset=False)
    total = len(features)
    return tuple(
        CategoryShare(name=name, count=count, pct=share(count, total), color=category_color(name))
        for name, count in order_by_count(counts)
    )


def category_breakdowns(features: Sequence[Feature]) -> dict[str, CategoryBreakdown]:
    """Geo, model and product distribution for every category, for drill-down."""

    breakdowns: dict[str, CategoryBreakdown] = {}
    groups: dict[str, list[Feature]] = {}
    for feature in features:
        if feature.primary_category:
            groups.setdefault(feature.primary_category, []).append(feature)

    for item in category_distribution(features):
        members = groups[item.name]
        breakdowns[item.name] = CategoryBreakdown(
            name=item.name,
            color=item.color,
            total=item.count,
            by_geo=_ordered_counts(members, FilterKey.GEO.read),
            by_model=_ordered_counts(members, FilterKey.MODEL_NAME.read),
            by_product=_ordered_counts(members, FilterKey.PRODUCT_BUSINESS.read),
        )
    return breakdowns


def build_summary_tree(
    features: Sequence[Feature],
    levels: Sequence[Accessor] = SUMMARY_LEVELS,
    *,
    grand_total: int | None = None,
) -> tuple[SummaryNode, ...]:
    """Partition ``features`` recursively along ``levels``.

    ``pct`` on every node is relative to ``grand_total`` (the size of the
    collection passed at the top level), not to the parent. A child level made
    of a single ``Unknown`` node is dropped.
    """

    if not levels:
        return ()
    total = len(features) if grand_total is None else grand_total
    accessor, remaining = levels[0], levels[1:]
    is_root = grand_total is None

    nodes = []
    for name, members in partition_by(features, accessor).items():
        children = build_summary_tree(members, remaining, grand_total=total) if remaining else ()
        nodes.append(
            SummaryNode(
                name=name,
                count=len(members),
                pct=share(len(members), total),
                by_geo=dict(count_by(members, FilterKey.GEO.read, keep_unset=False)),
                by_product=dict(count_by(members, FilterKey.PRODUCT_BUSINESS.read, keep_unset=False)),
                color=category_color(name) if is_root else None,
                children=_collapse(children),
            )
        )
    return tuple(sorted(nodes, key=lambda node: (-node.count, node.name)))


def summarize(features: Sequence[Feature]) -> SummaryStructures:
    """Compute every structure shown on the summary view."""

    return SummaryStructures(
        kpis=compute_kpis(features),
        category_bar=category_distribution(features),
        category_breakdowns=category_breakdowns(features),
        tree=build_summary_tree(features),
        all_geos=tuple(distinct_sorted(features, FilterKey.GEO.read)),
        all_products=tuple(distinct_sorted(features, FilterKey.PRODUCT_BUSINESS.read)),
    )


def _collapse(children: tuple[SummaryNode, ...]) -> tuple[SummaryNode, ...] | None:
    if not children:
        return None
    if len(children) < 2 and children[0].name == UNKNOWN_LABEL:
        return None
    return children


def _ordered_counts(features: Sequence[Feature], accessor: Accessor) -> tuple[tuple[str, int], ...]:
    return tuple(order_by_count(count_by(features, accessor, keep_unset=False)))


__all__ = [
    "CategoryBreakdown",
    "CategoryShare",
    "Kpis",
    "SUMMARY_LEVELS",
    "SummaryNode",
    "SummaryStructures",
    "build_summary_tree",
    "category_breakdowns",
    "category_distribution",
    "compute_kpis",
    "summarize",
]
