"""Checks for the static planning framework and glossary."""

from __future__ import annotations

import pytest

from feature_catalog.models import Feature
from feature_catalog.ref.framework import (
    BRAINSTORM_SECTIONS,
    CATEGORY_ORDER,
    DEFAULT_CATEGORY_COLOR,
    KNOWN_GAPS,
    MANIPULATION_RISK,
    TaxonomyMatch,
    category_color,
)
from feature_catalog.ref.glossary import DEFINITIONS, glossary_payload, lookup_term


def test_taxonomy_match_is_any_rule() -> None:
    rule = TaxonomyMatch(
        primary_category=("User-Reported Data",),
        feature_type=("Questionnaire",),
        feature_subtype=("Payment Behavior",),
    )

    assert rule.matches(Feature(id=1, primary_category="User-Reported Data"))
    assert rule.matches(Feature(id=2, feature_type="Questionnaire"))
    assert rule.matches(Feature(id=3, feature_subtype="Late Payment Behavior 90d"))
    assert not rule.matches(Feature(id=4, feature_subtype="Payments"))
    assert not rule.matches(Feature(id=5))


def test_empty_rule_matches_nothing() -> None:
    assert not TaxonomyMatch().matches(Feature(id=1, primary_category="Bureau", feature_subtype="x"))


def test_brainstorm_framework_shape() -> None:
    assert [section.id for section in BRAINSTORM_SECTIONS] == ["internal", "sms", "external"]
    planned = {category.id: category.planned for section in BRAINSTORM_SECTIONS for category in section.categories}
    assert planned["repayment"] == 50
    assert planned["sms_all"] == 100
    assert planned["bureau"] is None


def test_risk_tiers_cover_canonical_categories_once() -> None:
    assigned = [category for tier in MANIPULATION_RISK for category in tier.categories]

    assert sorted(assigned) == sorted(CATEGORY_ORDER)
    assert [tier.level for tier in MANIPULATION_RISK] == ["low", "medium", "high"]


def test_known_gaps() -> None:
    global_gaps = [gap.id for gap in KNOWN_GAPS if gap.is_global]

    assert global_gaps == ["lenderlink"]
    assert KNOWN_GAPS[0].as_dict()["geo"] == "PH"


def test_category_color_falls_back() -> None:
    assert category_color("Bureau") != DEFAULT_CATEGORY_COLOR
    assert category_color("Telemetry") == DEFAULT_CATEGORY_COLOR


@pytest.mark.parametrize("term", ["ml model", "ML MODEL", "  Ml Model "])
def test_lookup_term_is_case_insensitive(term: str) -> None:
    definition = lookup_term(term)

    assert definition is not None
    assert definition.term == "ML Model"


def test_lookup_unknown_term() -> None:
    assert lookup_term("Quantum Credit") is None


def test_glossary_payload_sections() -> None:
    payload = glossary_payload()

    assert len(payload["definitions"]) == len(DEFINITIONS)
    assert [level["label"] for level in payload["hierarchy"]][0] == "Market"
    assert payload["user_segmentation"][0]["product"] == "US Cash Advance"
