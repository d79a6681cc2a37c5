"""Tests for report frames and the coverage heatmap."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from feature_catalog.engine.crosstab import RowDimension, build_geo_matrix, build_matrix, find_coverage_gaps
from feature_catalog.engine.gaps import evaluate_brainstorm, risk_distribution
from feature_catalog.engine.summary import build_summary_tree
from feature_catalog.models import Feature
from feature_catalog.ref.framework import BRAINSTORM_SECTIONS, GEO_ORDER
from feature_catalog.reporting.export import (
    TOTAL_LABEL,
    brainstorm_to_frame,
    gaps_to_frame,
    matrix_to_frame,
    plot_coverage_heatmap,
    risk_to_frame,
    save_report,
    summary_tree_to_frame,
)


@pytest.fixture()
def features() -> list[Feature]:
    return [
        Feature(id=1, geo="US", product_business="Cash Advance", model_name="Boron",
                primary_category="Bureau", feature_type="Credit/Loan History"),
        Feature(id=2, geo="US", product_business="Cash Advance", model_name="Boron",
                primary_category="Cash Flow", feature_type="Balances"),
        Feature(id=3, geo="MX", product_business="Bullet Loans", model_name="Durango",
                primary_category="Bureau", feature_type="Credit/Loan History"),
    ]


def test_matrix_to_frame_adds_totals(features: list[Feature]) -> None:
    frame = matrix_to_frame(build_matrix(features, RowDimension.GEO))

    assert list(frame.index) == ["MX", "US"]
    assert frame.index.name == "geo"
    assert list(frame.columns) == ["Bureau", "Cash Flow", TOTAL_LABEL]
    assert frame.loc["US", TOTAL_LABEL] == 2
    assert frame[TOTAL_LABEL].sum() == len(features)


def test_model_matrix_frame_has_three_level_index(features: list[Feature]) -> None:
    frame = matrix_to_frame(build_matrix(features, RowDimension.MODEL_NAME), include_totals=False)

    assert list(frame.index.names) == ["geo", "product", "model"]
    assert frame.loc[("US", "Cash Advance", "Boron"), "Cash Flow"] == 1
    assert TOTAL_LABEL not in frame.columns


def test_gap_and_risk_frames(features: list[Feature]) -> None:
    gaps = gaps_to_frame(find_coverage_gaps(build_geo_matrix(features)))
    risk = risk_to_frame(risk_distribution(features))

    assert list(gaps.columns) == ["geo", "category", "count"]
    assert len(gaps) == 24
    assert list(risk["level"]) == ["low", "medium", "high"]
    assert risk.loc[0, "percentage"] == 100


def test_brainstorm_frame_has_one_row_per_category(features: list[Feature]) -> None:
    frame = brainstorm_to_frame(evaluate_brainstorm(features))

    expected_rows = sum(len(section.categories) for section in BRAINSTORM_SECTIONS)
    assert len(frame) == expected_rows
    assert {f"geo_{geo}" for geo in GEO_ORDER}.issubset(frame.columns)
    loans = frame.loc[frame["category"] == "Loans"].iloc[0]
    assert loans["current"] == 2


def test_summary_tree_frame_walks_depth_first(features: list[Feature]) -> None:
    frame = summary_tree_to_frame(build_summary_tree(features))

    assert frame.loc[0, "name"] == "Bureau"
    assert frame.loc[1, "path"] == "Bureau > Credit/Loan History"
    assert frame["level"].max() == 2


def test_save_report_writes_csv(tmp_path: Path, features: list[Feature]) -> None:
    frame = matrix_to_frame(build_matrix(features, RowDimension.GEO))

    path = save_report(frame, reports_dir=tmp_path / "reports", name="matrix_geo.csv")

    assert path.exists()
    reloaded = pd.read_csv(path, index_col=0)
    assert reloaded.loc["US", TOTAL_LABEL] == 2


def test_plot_coverage_heatmap_writes_image(tmp_path: Path, features: list[Feature]) -> None:
    output = plot_coverage_heatmap(build_geo_matrix(features), path=tmp_path / "plots" / "geo.png")

    assert output.exists()
    assert output.stat().st_size > 0


def test_plot_model_heatmap(tmp_path: Path, features: list[Feature]) -> None:
    output = plot_coverage_heatmap(
        build_matrix(features, RowDimension.MODEL_NAME), path=tmp_path / "model.png", title="Models"
    )

    assert output.exists()
