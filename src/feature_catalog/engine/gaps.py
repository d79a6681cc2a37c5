"""Planned-versus-actual comparisons and manipulation-risk distribution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from feature_catalog.models import Feature, label_or_unknown
from feature_catalog.ref.framework import (
    BRAINSTORM_SECTIONS,
    GEO_ORDER,
    MANIPULATION_RISK,
    BrainstormCategory,
    BrainstormSection,
    RiskTier,
)

from .grouping import percentage


STATUS_AT_TARGET = "at target"
STATUS_PARTIAL = "partial"
STATUS_GAP = "gap"
STATUS_NEUTRAL = "neutral"


@dataclass(frozen=True, slots=True)
class BrainstormCategoryResult:
    category: BrainstormCategory
    current: int
    by_geo: dict[str, int]

    @property
    def status(self) -> str:
        return gap_status(self.current, self.category.planned)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.category.id,
            "label": self.category.label,
            "planned": self.category.planned,
            "description": self.category.description,
            "taxonomy_match": self.category.taxonomy_match.as_dict(),
            "current": self.current,
            "by_geo": dict(self.by_geo),
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class BrainstormSectionResult:
    id: str
    label: str
    categories: tuple[BrainstormCategoryResult, ...]

    @property
    def total(self) -> int:
        return sum(result.current for result in self.categories)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "total": self.total,
            "categories": [result.as_dict() for result in self.categories],
        }


@dataclass(frozen=True, slots=True)
class RiskBucket:
    level: str
    label: str
    color: str
    count: int
    percentage: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "label": self.label,
            "color": self.color,
            "count": self.count,
            "percentage": self.percentage,
        }


def gap_status(current: int, planned: int | None) -> str:
    """Classify progress against a planned target.

    Categories without a target are ``"neutral"``; otherwise the ratio of
    current to planned decides between ``"at target"`` (>= 1), ``"partial"``
    (>= 0.5) and ``"gap"``.
    """

    if planned is None:
        return STATUS_NEUTRAL
    if planned <= 0:
        return STATUS_AT_TARGET
    ratio = current / planned
    if ratio >= 1:
        return STATUS_AT_TARGET
    if ratio >= 0.5:
        return STATUS_PARTIAL
    return STATUS_GAP


def evaluate_category(
    features: Sequence[Feature],
    category: BrainstormCategory,
    *,
    geos: Sequence[str] = GEO_ORDER,
) -> BrainstormCategoryResult:
    by_geo = {geo: 0 for geo in geos}
    current = 0
    for feature in features:
        if category.taxonomy_match.matches(feature):
            current += 1
            geo = label_or_unknown(feature.geo)
            by_geo[geo] = by_geo.get(geo, 0) + 1
    return BrainstormCategoryResult(category=category, current=current, by_geo=by_geo)


def evaluate_brainstorm(
    features: Sequence[Feature],
    sections: Sequence[BrainstormSection] = BRAINSTORM_SECTIONS,
) -> list[BrainstormSectionResult]:
    """Count the features matching every brainstorm category, section by section."""

    return [
        BrainstormSectionResult(
            id=section.id,
            label=section.label,
            categories=tuple(evaluate_category(features, category) for category in section.categories),
        )
        for section in sections
    ]


def risk_distribution(
    features: Sequence[Feature],
    tiers: Sequence[RiskTier] = MANIPULATION_RISK,
) -> list[RiskBucket]:
    """Split features across the manipulation-risk tiers.

    Each percentage is rounded on its own, so the three need not add up to
    100. Features whose category maps to no tier count towards the total but
    towards no bucket.
    """

    counts = {tier.level: 0 for tier in tiers}
    for feature in features:
        for tier in tiers:
            if feature.primary_category in tier.categories:
                counts[tier.level] += 1
                break

    total = len(features)
    return [
        RiskBucket(
            level=tier.level,
            label=tier.label,
            color=tier.color,
            count=counts[tier.level],
            percentage=percentage(counts[tier.level], total),
        )
        for tier in tiers
    ]


__all__ = [
    "BrainstormCategoryResult",
    "BrainstormSectionResult",
    "RiskBucket",
    "STATUS_AT_TARGET",
    "STATUS_GAP",
    "STATUS_NEUTRAL",
    "STATUS_PARTIAL",
    "evaluate_brainstorm",
    "evaluate_category",
    "gap_status",
    "risk_distribution",
]
