"""Navigation count trees built from the full, unfiltered feature collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from feature_catalog.models import Feature, FilterKey, TaxonomyNode

from .grouping import Accessor, count_by, order_by_count, partition_by


DEFAULT_SHAP_RANGE: tuple[float, float] = (1, 250)

CATEGORY_LEVELS: tuple[Accessor, ...] = (
    FilterKey.PRIMARY_CATEGORY.read,
    FilterKey.FEATURE_TYPE.read,
    FilterKey.FEATURE_SUBTYPE.read,
)

MODEL_LEVELS: tuple[Accessor, ...] = (
    FilterKey.GEO.read,
    FilterKey.PRODUCT_BUSINESS.read,
    FilterKey.MODEL_NAME.read,
)


@dataclass(frozen=True, slots=True)
class ShapRange:
    min: float
    max: float


@dataclass(frozen=True, slots=True)
class TaxonomyStructures:
    """Every navigation tree shown in the taxonomy sidebar."""

    by_category: tuple[TaxonomyNode, ...]
    by_geo: tuple[TaxonomyNode, ...]
    by_product: tuple[TaxonomyNode, ...]
    by_model_grouped: tuple[TaxonomyNode, ...]
    by_model: tuple[TaxonomyNode, ...]
    by_top_rank: tuple[TaxonomyNode, ...]
    shap_range: ShapRange

    def as_dict(self) -> dict[str, Any]:
        return {
            "by_category": [node.as_dict() for node in self.by_category],
            "by_geo": [node.as_dict() for node in self.by_geo],
            "by_product": [node.as_dict() for node in self.by_product],
            "by_model_grouped": [node.as_dict() for node in self.by_model_grouped],
            "by_model": [node.as_dict() for node in self.by_model],
            "by_top_rank": [node.as_dict() for node in self.by_top_rank],
            "shap_range": {"min": self.shap_range.min, "max": self.shap_range.max},
        }


def build_count_tree(features: Sequence[Feature], levels: Sequence[Accessor]) -> tuple[TaxonomyNode, ...]:
    """Group ``features`` level by level into a nested count tree.

    The first accessor defines the roots, each further accessor one level of
    children. Leaves carry the raw record count and every parent the sum of
    its children. Siblings are ordered by descending count, then by name.
    """

    if not levels:
        return ()

    accessor, remaining = levels[0], levels[1:]
    if not remaining:
        return count_values(features, accessor)

    nodes = []
    for name, members in partition_by(features, accessor).items():
        children = build_count_tree(members, remaining)
        nodes.append(
            TaxonomyNode(name=name, count=sum(child.count for child in children), children=children)
        )
    return _ordered(nodes)


def count_values(
    features: Sequence[Feature], accessor: Accessor, *, keep_unset: bool = True
) -> tuple[TaxonomyNode, ...]:
    """Flat count list for one field."""

    counts = count_by(features, accessor, keep_unset=keep_unset)
    return tuple(TaxonomyNode(name=name, count=count) for name, count in order_by_count(counts))


def shap_range(features: Sequence[Feature]) -> ShapRange:
    ranks = [feature.shap_rank for feature in features if feature.shap_rank is not None]
    if not ranks:
        return ShapRange(*DEFAULT_SHAP_RANGE)
    return ShapRange(min=min(ranks), max=max(ranks))


def build_taxonomy(features: Sequence[Feature]) -> TaxonomyStructures:
    """Build the sidebar trees; pass the unfiltered collection."""

    return TaxonomyStructures(
        by_category=build_count_tree(features, CATEGORY_LEVELS),
        by_geo=count_values(features, FilterKey.GEO.read),
        by_product=count_values(features, FilterKey.PRODUCT_BUSINESS.read),
        by_model_grouped=build_count_tree(features, MODEL_LEVELS),
        by_model=count_values(features, FilterKey.MODEL_NAME.read),
        by_top_rank=count_values(features, FilterKey.TOP_20_50.read, keep_unset=False),
        shap_range=shap_range(features),
    )


def _ordered(nodes: list[TaxonomyNode]) -> tuple[TaxonomyNode, ...]:
    return tuple(sorted(nodes, key=lambda node: (-node.count, node.name)))


__all__ = [
    "CATEGORY_LEVELS",
    "DEFAULT_SHAP_RANGE",
    "MODEL_LEVELS",
    "ShapRange",
    "TaxonomyStructures",
    "build_count_tree",
    "build_taxonomy",
    "count_values",
    "shap_range",
]
