"""Dataframe contract helpers for the raw feature inventory.

The inventory arrives as loosely typed JSON exported from a spreadsheet. This
module checks the minimum viable column set before any record reaches the
engine and normalizes the frame so every optional column exists, unset text
is an empty string and ``shap_rank`` is numeric or missing.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from feature_catalog.models import STRING_FIELDS, Feature, coerce_shap_rank


FEATURE_REQUIRED_COLUMNS: frozenset[str] = frozenset(
    {
        "id",
        "feature_name",
        "primary_category",
    }
)

FEATURE_COLUMNS: tuple[str, ...] = ("id",) + STRING_FIELDS + ("shap_rank",)


def _assert_columns(
    df: pd.DataFrame,
    required: Iterable[str],
    dataset_name: str,
) -> None:
    """Raise ``ValueError`` if ``required`` columns are missing from ``df``.

    Args:
        df: Dataframe built from the raw payload.
        required: Iterable of column names that must exist on ``df``.
        dataset_name: Human-friendly dataset label used in error messages.

    Raises:
        ValueError: When any required column is absent.
    """

    present_columns = set(df.columns)
    missing = set(required) - present_columns
    if not missing:
        return

    sample_present = sorted(present_columns)[:5]
    sample_display = ", ".join(sample_present) if sample_present else "<no columns>"
    missing_display = ", ".join(sorted(missing))
    raise ValueError(
        f"{dataset_name} missing required columns: {missing_display}. "
        f"Present columns include: {sample_display}."
    )


def assert_feature_contract(df: pd.DataFrame) -> None:
    """Validate that a feature inventory frame is usable by the engine.

    Parameters
    ----------
    df:
        Frame built from the raw JSON records.

    Raises
    ------
    ValueError
        If required columns are missing, an ``id`` is not an integer or two
        records share an ``id``.
    """

    _assert_columns(df, FEATURE_REQUIRED_COLUMNS, "Feature inventory")

    ids = pd.to_numeric(df["id"], errors="coerce")
    invalid = df.loc[ids.isna() | (ids % 1 != 0), "id"]
    if not invalid.empty:
        sample = ", ".join(repr(value) for value in invalid.head(5).tolist())
        raise ValueError(f"Feature inventory has non-integer ids: {sample}.")

    duplicated = ids[ids.duplicated()].astype(int).unique().tolist()
    if duplicated:
        raise ValueError(f"Feature inventory has duplicate ids: {sorted(duplicated)[:5]}.")


def normalize_feature_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with every feature column present and consistently typed."""

    frame = df.copy()
    for column in STRING_FIELDS:
        if column not in frame.columns:
            frame[column] = ""
        frame[column] = frame[column].fillna("").astype(str).str.strip()

    if "shap_rank" not in frame.columns:
        frame["shap_rank"] = None
    frame["shap_rank"] = frame["shap_rank"].map(coerce_shap_rank).astype(object)
    frame["id"] = pd.to_numeric(frame["id"]).astype(int)

    return frame.loc[:, list(FEATURE_COLUMNS)].reset_index(drop=True)


def records_to_features(records: list[dict]) -> list[Feature]:
    """Validate raw JSON records and convert them into :class:`Feature` values."""

    if not records:
        return []
    frame = pd.DataFrame.from_records(records)
    assert_feature_contract(frame)
    normalized = normalize_feature_frame(frame)
    return [Feature.from_mapping(row) for row in normalized.to_dict(orient="records")]


def features_to_frame(features: Iterable[Feature]) -> pd.DataFrame:
    """Inverse of :func:`records_to_features`, used for reports."""

    return pd.DataFrame.from_records(
        [feature.as_dict() for feature in features], columns=list(FEATURE_COLUMNS)
    )


__all__ = [
    "FEATURE_COLUMNS",
    "FEATURE_REQUIRED_COLUMNS",
    "assert_feature_contract",
    "features_to_frame",
    "normalize_feature_frame",
    "records_to_features",
]
