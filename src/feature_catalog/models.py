"""Core record types shared by the loaders and the analytical engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping


UNKNOWN_LABEL = "Unknown"

STRING_FIELDS: tuple[str, ...] = (
    "model_name",
    "user_type",
    "geo",
    "product_business",
    "feature_name",
    "description",
    "primary_category",
    "feature_type",
    "feature_subtype",
    "feature_l3",
    "top_20_50",
)


@dataclass(frozen=True, slots=True)
class Feature:
    """A single model input signal with its taxonomy and ranking metadata.

    Every string field may be empty, which means "unset". ``shap_rank`` is
    ``None`` when the explainability report did not rank the feature.
    """

    id: int
    model_name: str = ""
    user_type: str = ""
    geo: str = ""
    product_business: str = ""
    feature_name: str = ""
    description: str = ""
    primary_category: str = ""
    feature_type: str = ""
    feature_subtype: str = ""
    feature_l3: str = ""
    top_20_50: str = ""
    shap_rank: float | None = None

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "Feature":
        """Build a feature from a loosely typed JSON record."""

        try:
            feature_id = int(record["id"])
        except KeyError as exc:
            raise ValueError("Feature record is missing 'id'.") from exc
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Feature id {record.get('id')!r} is not an integer.") from exc

        values = {name: _coerce_text(record.get(name)) for name in STRING_FIELDS}
        return cls(id=feature_id, shap_rank=coerce_shap_rank(record.get("shap_rank")), **values)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.id}
        for name in STRING_FIELDS:
            payload[name] = getattr(self, name)
        payload["shap_rank"] = self.shap_rank
        return payload


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def coerce_shap_rank(value: Any) -> float | None:
    """Return a numeric SHAP rank or ``None`` when the value is absent or invalid."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        rank = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(rank) or math.isinf(rank):
        return None
    return int(rank) if rank.is_integer() else rank


class FilterKey(str, Enum):
    """The categorical fields a user can constrain in the explorer."""

    MODEL_NAME = "model_name"
    USER_TYPE = "user_type"
    GEO = "geo"
    PRODUCT_BUSINESS = "product_business"
    PRIMARY_CATEGORY = "primary_category"
    FEATURE_TYPE = "feature_type"
    FEATURE_SUBTYPE = "feature_subtype"
    FEATURE_L3 = "feature_l3"
    TOP_20_50 = "top_20_50"

    @property
    def label(self) -> str:
        return FILTER_LABELS[self]

    def read(self, feature: Feature) -> str:
        """Return the value of this key on ``feature``."""
        return FIELD_ACCESSORS[self](feature)


FILTER_KEYS: tuple[FilterKey, ...] = tuple(FilterKey)

FILTER_LABELS: dict[FilterKey, str] = {
    FilterKey.MODEL_NAME: "Model",
    FilterKey.USER_TYPE: "User Type",
    FilterKey.GEO: "Geo",
    FilterKey.PRODUCT_BUSINESS: "Product",
    FilterKey.PRIMARY_CATEGORY: "Category",
    FilterKey.FEATURE_TYPE: "Type",
    FilterKey.FEATURE_SUBTYPE: "Subtype",
    FilterKey.FEATURE_L3: "L3",
    FilterKey.TOP_20_50: "Top Rank",
}

FIELD_ACCESSORS: dict[FilterKey, Callable[[Feature], str]] = {
    FilterKey.MODEL_NAME: lambda feature: feature.model_name,
    FilterKey.USER_TYPE: lambda feature: feature.user_type,
    FilterKey.GEO: lambda feature: feature.geo,
    FilterKey.PRODUCT_BUSINESS: lambda feature: feature.product_business,
    FilterKey.PRIMARY_CATEGORY: lambda feature: feature.primary_category,
    FilterKey.FEATURE_TYPE: lambda feature: feature.feature_type,
    FilterKey.FEATURE_SUBTYPE: lambda feature: feature.feature_subtype,
    FilterKey.FEATURE_L3: lambda feature: feature.feature_l3,
    FilterKey.TOP_20_50: lambda feature: feature.top_20_50,
}


@dataclass(frozen=True, slots=True)
class TaxonomyNode:
    """A node of a recursive count tree."""

    name: str
    count: int
    children: tuple["TaxonomyNode", ...] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "count": self.count}
        if self.children is not None:
            payload["children"] = [child.as_dict() for child in self.children]
        return payload


def label_or_unknown(value: str) -> str:
    """Map an unset field value onto the shared sentinel group label."""
    return value if value else UNKNOWN_LABEL


__all__ = [
    "FIELD_ACCESSORS",
    "FILTER_KEYS",
    "FILTER_LABELS",
    "Feature",
    "FilterKey",
    "STRING_FIELDS",
    "TaxonomyNode",
    "UNKNOWN_LABEL",
    "coerce_shap_rank",
    "label_or_unknown",
]
