"""Static planning framework used by the gap analysis views.

The brainstorm framework lists the feature families the credit-risk team
planned to build, each with an optional target count and the taxonomy rules
that decide which catalogued features count towards it. The remaining tables
fix the canonical display order for geographies and categories, the
manipulation-risk tiers and the known critical gaps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from feature_catalog.models import Feature


@dataclass(frozen=True, slots=True)
class TaxonomyMatch:
    """Rules deciding whether a feature counts towards a brainstorm category.

    A feature matches when *any* configured rule matches: equality on
    ``primary_category`` or ``feature_type``, or one of the
    ``feature_subtype`` fragments appearing inside the feature's subtype.
    """

    primary_category: tuple[str, ...] = ()
    feature_type: tuple[str, ...] = ()
    feature_subtype: tuple[str, ...] = ()

    def matches(self, feature: Feature) -> bool:
        if feature.primary_category in self.primary_category:
            return True
        if feature.feature_type in self.feature_type:
            return True
        subtype = feature.feature_subtype
        return bool(subtype) and any(fragment in subtype for fragment in self.feature_subtype)

    def as_dict(self) -> dict[str, list[str]]:
        payload: dict[str, list[str]] = {}
        if self.primary_category:
            payload["primary_category"] = list(self.primary_category)
        if self.feature_type:
            payload["feature_type"] = list(self.feature_type)
        if self.feature_subtype:
            payload["feature_subtype"] = list(self.feature_subtype)
        return payload


@dataclass(frozen=True, slots=True)
class BrainstormCategory:
    id: str
    label: str
    planned: int | None
    description: str
    taxonomy_match: TaxonomyMatch


@dataclass(frozen=True, slots=True)
class BrainstormSection:
    id: str
    label: str
    categories: tuple[BrainstormCategory, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class RiskTier:
    level: str
    label: str
    color: str
    categories: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class KnownGap:
    id: str
    geo: str
    category: str
    current: int
    description: str

    @property
    def is_global(self) -> bool:
        return self.geo == ALL_GEOS

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "geo": self.geo,
            "category": self.category,
            "current": self.current,
            "description": self.description,
        }


ALL_GEOS = "All"

GEO_ORDER: tuple[str, ...] = ("India", "MX", "PH", "US")

CATEGORY_ORDER: tuple[str, ...] = (
    "Bureau",
    "Cash Flow",
    "Device Data",
    "Loan Activity",
    "Platform Data",
    "User-Reported Data",
)

DEFAULT_CATEGORY_COLOR = "#6b7280"

CATEGORY_COLORS: dict[str, str] = {
    "Bureau": "#f59e0b",
    "Cash Flow": "#10b981",
    "Device Data": "#8b5cf6",
    "Loan Activity": "#ec4899",
    "Platform Data": "#06b6d4",
    "User-Reported Data": "#f97316",
}


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)


BRAINSTORM_SECTIONS: tuple[BrainstormSection, ...] = (
    BrainstormSection(
        id="internal",
        label="Internal Data",
        categories=(
            BrainstormCategory(
                id="loans",
                label="Loans",
                planned=30,
                description="Loan amounts, counts, tenure, time sequence",
                taxonomy_match=TaxonomyMatch(feature_type=("Credit/Loan History",)),
            ),
            BrainstormCategory(
                id="repayment",
                label="Repayment",
                planned=50,
                description="Repayment amounts, rates, days since repay",
                taxonomy_match=TaxonomyMatch(
                    feature_subtype=(
                        "Collections, Recoveries, Repayments",
                        "Payment Behavior",
                        "Repayment Metrics",
                    )
                ),
            ),
            BrainstormCategory(
                id="applications",
                label="Applications",
                planned=50,
                description="Application counts, desired amounts, timing",
                taxonomy_match=TaxonomyMatch(
                    feature_type=("Loan Application",),
                    feature_subtype=("Application Timing", "Application Counts"),
                ),
            ),
            BrainstormCategory(
                id="collections",
                label="Collections",
                planned=10,
                description="Call results, PTP, connect rates",
                taxonomy_match=TaxonomyMatch(
                    feature_subtype=("Collections, Recoveries, Repayments",)
                ),
            ),
            BrainstormCategory(
                id="app_install",
                label="App Installation",
                planned=30,
                description="App types, popularity, blacklist, install timing",
                taxonomy_match=TaxonomyMatch(feature_type=("App Ecosystem",)),
            ),
            BrainstormCategory(
                id="user_profile",
                label="User Profile",
                planned=10,
                description="Age, ID type, income, gender, education",
                taxonomy_match=TaxonomyMatch(
                    primary_category=("User-Reported Data",),
                    feature_type=("Questionnaire", "KYC/Identity"),
                ),
            ),
            BrainstormCategory(
                id="device_behavior",
                label="Device & App Behavior",
                planned=10,
                description="Login times, password changes, IP counts",
                taxonomy_match=TaxonomyMatch(
                    feature_type=("Device Hardware and Network", "User Engagement"),
                ),
            ),
            BrainstormCategory(
                id="marketing",
                label="Marketing/Acquisition",
                planned=5,
                description="Channels, referral tiers",
                taxonomy_match=TaxonomyMatch(feature_type=("Acquisition Channel",)),
            ),
        ),
    ),
    BrainstormSection(
        id="sms",
        label="SMS Data",
        categories=(
            BrainstormCategory(
                id="sms_all",
                label="SMS Features",
                planned=100,
                description="Overdue, due reminders, inquiries, transactions",
                taxonomy_match=TaxonomyMatch(feature_type=("SMS",)),
            ),
        ),
    ),
    BrainstormSection(
        id="external",
        label="External Data",
        categories=(
            BrainstormCategory(
                id="bureau",
                label="Bureau",
                planned=None,
                description="Credit bureau data (CIBI, Experian, etc.)",
                taxonomy_match=TaxonomyMatch(primary_category=("Bureau",)),
            ),
            BrainstormCategory(
                id="cashflow",
                label="Cash Flow (Bank)",
                planned=None,
                description="Bank transaction data (Plaid, etc.)",
                taxonomy_match=TaxonomyMatch(primary_category=("Cash Flow",)),
            ),
        ),
    ),
)

# Tiers are checked in this order; a category belongs to at most one tier.
MANIPULATION_RISK: tuple[RiskTier, ...] = (
    RiskTier(
        level="low",
        label="Low (Third-Party)",
        color="#10b981",
        categories=("Bureau", "Cash Flow"),
    ),
    RiskTier(
        level="medium",
        label="Medium (On-Us)",
        color="#f59e0b",
        categories=("Device Data", "Loan Activity"),
    ),
    RiskTier(
        level="high",
        label="High (Self-Reported)",
        color="#ef4444",
        categories=("User-Reported Data", "Platform Data"),
    ),
)

KNOWN_GAPS: tuple[KnownGap, ...] = (
    KnownGap("ph_bureau", "PH", "Bureau", 0, "No bureau features - CIBI/LenderLink not integrated"),
    KnownGap("india_cashflow", "India", "Cash Flow", 4, "Minimal bank data - mostly bureau-focused"),
    KnownGap("ph_sms", "PH", "SMS", 0, "No SMS features in production"),
    KnownGap("us_sms", "US", "SMS", 0, "No SMS features in production"),
    KnownGap("mx_bureau", "MX", "Bureau", 15, "Limited bureau coverage"),
    KnownGap("lenderlink", ALL_GEOS, "LenderLink", 0, "LenderLink features not tagged in taxonomy"),
)


__all__ = [
    "ALL_GEOS",
    "BRAINSTORM_SECTIONS",
    "BrainstormCategory",
    "BrainstormSection",
    "CATEGORY_COLORS",
    "CATEGORY_ORDER",
    "DEFAULT_CATEGORY_COLOR",
    "GEO_ORDER",
    "KNOWN_GAPS",
    "KnownGap",
    "MANIPULATION_RISK",
    "RiskTier",
    "TaxonomyMatch",
    "category_color",
]
