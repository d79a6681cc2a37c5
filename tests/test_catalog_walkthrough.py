"""Filter, taxonomy and matrix behaviour on one small catalog."""

from __future__ import annotations

from feature_catalog.engine.crosstab import build_geo_matrix
from feature_catalog.engine.filters import EMPTY_FILTERS, apply_filters, set_selection, set_shap_rank_max
from feature_catalog.engine.taxonomy import build_taxonomy
from feature_catalog.models import Feature, FilterKey

CATALOG = [
    Feature.from_mapping(
        {"id": 1, "geo": "US", "primary_category": "Bureau", "feature_type": "Credit/Loan History",
         "shap_rank": 5, "top_20_50": "Top 20"}
    ),
    Feature.from_mapping(
        {"id": 2, "geo": "US", "primary_category": "Cash Flow", "feature_type": "", "shap_rank": 30,
         "top_20_50": ""}
    ),
    Feature.from_mapping(
        {"id": 3, "geo": "PH", "primary_category": "Bureau", "feature_type": "", "shap_rank": None,
         "top_20_50": ""}
    ),
]


def test_geo_then_shap_filters_narrow_the_catalog() -> None:
    us_only = set_selection(EMPTY_FILTERS, FilterKey.GEO, ["US"])
    assert [feature.id for feature in apply_filters(CATALOG, us_only)] == [1, 2]

    top_ranked = set_shap_rank_max(us_only, 10)
    assert [feature.id for feature in apply_filters(CATALOG, top_ranked)] == [1]


def test_category_tree_counts_unfiltered_catalog() -> None:
    roots = build_taxonomy(CATALOG).by_category

    assert [(node.name, node.count) for node in roots] == [("Bureau", 2), ("Cash Flow", 1)]


def test_geo_matrix_row_for_ph() -> None:
    matrix = build_geo_matrix(CATALOG)

    assert matrix.cell("PH", "Bureau") == 1
    assert matrix.cell("PH", "Cash Flow") == 0
