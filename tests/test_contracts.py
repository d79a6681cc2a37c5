"""Unit-like checks for the feature inventory contract."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from feature_catalog.ingest.contracts import (
    FEATURE_COLUMNS,
    FEATURE_REQUIRED_COLUMNS,
    assert_feature_contract,
    features_to_frame,
    normalize_feature_frame,
    records_to_features,
)


def _frame_with_columns(columns: set[str]) -> pd.DataFrame:
    """Return a tiny dataframe containing ``columns``."""

    return pd.DataFrame({column: [1] for column in columns})


def test_contract_accepts_minimal_frame() -> None:
    assert_feature_contract(_frame_with_columns(set(FEATURE_REQUIRED_COLUMNS)))


@pytest.mark.parametrize("missing", sorted(FEATURE_REQUIRED_COLUMNS))
def test_contract_reports_missing_columns(missing: str) -> None:
    frame = _frame_with_columns(set(FEATURE_REQUIRED_COLUMNS) - {missing})

    with pytest.raises(ValueError) as excinfo:
        assert_feature_contract(frame)

    message = str(excinfo.value)
    assert "Feature inventory missing required columns" in message
    assert missing in message
    assert "Present columns include" in message


def test_contract_rejects_non_integer_ids() -> None:
    frame = pd.DataFrame({"id": [1, "abc", 2.5], "feature_name": ["a", "b", "c"], "primary_category": ["x"] * 3})

    with pytest.raises(ValueError, match="non-integer ids"):
        assert_feature_contract(frame)


def test_contract_rejects_duplicate_ids() -> None:
    frame = pd.DataFrame({"id": [1, 2, 1], "feature_name": ["a", "b", "c"], "primary_category": ["x"] * 3})

    with pytest.raises(ValueError, match=r"duplicate ids: \[1\]"):
        assert_feature_contract(frame)


def test_normalize_fills_optional_columns() -> None:
    frame = pd.DataFrame(
        {"id": [1, 2], "feature_name": ["a", None], "primary_category": ["Bureau", "Cash Flow"]}
    )

    normalized = normalize_feature_frame(frame)

    assert list(normalized.columns) == list(FEATURE_COLUMNS)
    assert normalized.loc[1, "feature_name"] == ""
    assert normalized.loc[0, "geo"] == ""
    assert normalized["shap_rank"].isna().all()


def test_records_to_features_coerces_values() -> None:
    records = [
        {"id": 1, "feature_name": "bureau_score", "primary_category": "Bureau", "shap_rank": 4},
        {"id": 2, "feature_name": "balance", "primary_category": "Cash Flow", "shap_rank": "n/a"},
        {"id": 3, "feature_name": "device_age", "primary_category": "Device Data", "shap_rank": math.nan},
    ]

    features = records_to_features(records)

    assert [feature.id for feature in features] == [1, 2, 3]
    assert features[0].shap_rank == 4
    assert features[1].shap_rank is None
    assert features[2].shap_rank is None
    assert features[2].model_name == ""


def test_records_to_features_handles_empty_payload() -> None:
    assert records_to_features([]) == []


def test_features_to_frame_has_every_column() -> None:
    features = records_to_features([{"id": 5, "feature_name": "x", "primary_category": "Bureau"}])

    frame = features_to_frame(features)

    assert list(frame.columns) == list(FEATURE_COLUMNS)
    assert frame.loc[0, "id"] == 5
