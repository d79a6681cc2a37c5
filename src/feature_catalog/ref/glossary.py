"""Static glossary of credit-decisioning terms shown next to the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Definition:
    term: str
    description: str


@dataclass(frozen=True, slots=True)
class HierarchyLevel:
    label: str
    items: tuple[str, ...]
    color: str


@dataclass(frozen=True, slots=True)
class SegmentationRow:
    product: str
    new_user: str
    existing_user: str
    notes: str


DEFINITIONS: tuple[Definition, ...] = (
    Definition("Market", "The country/region: US, Mexico, Philippines, India"),
    Definition("Product", "What's offered in a market: Cash Advance, Thrive, Credit Card"),
    Definition(
        "Credit Policy (CP)",
        "The decisioning rules. Uses ML scores + thresholds + business rules to make the "
        "final decision. The policy decides, not the model.",
    ),
    Definition("ML Model", "Scoring engine that outputs a risk score (0 to 1). Lower = better risk."),
    Definition(
        "Feature",
        "Data input to ML models: bank data (Plaid), credit bureau, device signals, platform behavior.",
    ),
    Definition(
        "SHAP rank",
        "Importance rank reported by the model explainability run; lower is more important.",
    ),
    Definition(
        "Coverage gap",
        "A geography and category pair with fewer features than the gap threshold.",
    ),
    Definition(
        "Manipulation risk",
        "How easily a user can game the data behind a category: third-party, on-us or self-reported.",
    ),
)

HIERARCHY: tuple[HierarchyLevel, ...] = (
    HierarchyLevel("Market", ("US", "Mexico", "Philippines", "India (Nira)"), "#e91e63"),
    HierarchyLevel(
        "Product",
        (
            "Cash Advance",
            "Thrive",
            "Credit Card",
            "Bullet Loans (MX)",
            "Cashloan (PH)",
            "Term Loans (Nira)",
        ),
        "#ff9800",
    ),
    HierarchyLevel("Credit Policy", ("CP 56, 57, 58 (US CA)", "Taurus CP (Thrive)", "Nira CP"), "#9c27b0"),
    HierarchyLevel(
        "ML Model",
        (
            "Boron, Beryllium (US CA)",
            "Taurus (Thrive)",
            "Durango, Ensenada (MX)",
            "Cebu, Baguio, Davao (PH)",
            "Nira V3",
        ),
        "#2196f3",
    ),
    HierarchyLevel(
        "Features",
        ("Cash Flow", "Device", "Loan Activity", "Bureau", "User-Reported", "Platform"),
        "#4caf50",
    ),
)

USER_SEGMENTATION: tuple[SegmentationRow, ...] = (
    SegmentationRow(
        "US Cash Advance",
        "Boron + Beryllium (same)",
        "Boron + Beryllium (same)",
        "User tenure handled by Credit Policy thresholds, not separate models",
    ),
    SegmentationRow(
        "Thrive",
        "Taurus AD (Approve/Decline)",
        "Taurus PQ (Prequalification)",
        "Two sub-models within Taurus for different decisioning stages",
    ),
    SegmentationRow("Philippines", "Cebu (new user)", "Baguio (repeat user)", "Davao used for all Cashloan users"),
    SegmentationRow("India (Nira)", "V3-Fresh", "V3-Repeat", "Separate models by user type"),
    SegmentationRow(
        "Mexico",
        "Durango, Ensenada (all)",
        "Durango, Ensenada (all)",
        "Same models for all user types",
    ),
)


def glossary_payload() -> dict[str, Any]:
    """Return the glossary as plain serializable data."""

    return {
        "definitions": [{"term": d.term, "description": d.description} for d in DEFINITIONS],
        "hierarchy": [
            {"label": level.label, "items": list(level.items), "color": level.color}
            for level in HIERARCHY
        ],
        "user_segmentation": [
            {
                "product": row.product,
                "new_user": row.new_user,
                "existing_user": row.existing_user,
                "notes": row.notes,
            }
            for row in USER_SEGMENTATION
        ],
    }


def lookup_term(term: str) -> Definition | None:
    """Return the definition for ``term`` using a case-insensitive match."""

    needle = term.strip().lower()
    for definition in DEFINITIONS:
        if definition.term.lower() == needle:
            return definition
    return None


__all__ = [
    "DEFINITIONS",
    "Definition",
    "HIERARCHY",
    "HierarchyLevel",
    "SegmentationRow",
    "USER_SEGMENTATION",
    "glossary_payload",
    "lookup_term",
]
