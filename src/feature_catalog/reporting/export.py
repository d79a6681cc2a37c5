"""Tabular exports and heatmap plots of the engine outputs."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from feature_catalog.engine.crosstab import CoverageGap, CrossTabMatrix, RowDimension
from feature_catalog.engine.gaps import BrainstormSectionResult, RiskBucket
from feature_catalog.engine.summary import SummaryNode


TOTAL_LABEL = "Total"


def matrix_to_frame(matrix: CrossTabMatrix, *, include_totals: bool = True) -> pd.DataFrame:
    """Return the matrix as a DataFrame indexed by row key.

    Model matrices get a three-level ``(geo, product, model)`` index; the other
    dimensions a flat index named after the dimension.
    """

    data = [[row.cells[category] for category in matrix.categories] for row in matrix.rows]
    if matrix.dimension == RowDimension.MODEL_NAME.value:
        index = pd.MultiIndex.from_arrays(
            [
                [row.key.geo for row in matrix.rows],
                [row.key.product for row in matrix.rows],
                [row.key.value for row in matrix.rows],
            ],
            names=["geo", "product", "model"],
        )
    else:
        index = pd.Index([row.key.value for row in matrix.rows], name=matrix.dimension)

    frame = pd.DataFrame(data, index=index, columns=list(matrix.categories), dtype="int64")
    if include_totals:
        frame[TOTAL_LABEL] = frame.sum(axis=1)
    return frame


def gaps_to_frame(gaps: Sequence[CoverageGap]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"geo": gap.geo, "category": gap.category, "count": gap.count} for gap in gaps],
        columns=["geo", "category", "count"],
    )


def brainstorm_to_frame(sections: Sequence[BrainstormSectionResult]) -> pd.DataFrame:
    """Flatten brainstorm results into one row per category."""

    records = []
    for section in sections:
        for result in section.categories:
            records.append(
                {
                    "section": section.label,
                    "category": result.category.label,
                    "planned": result.category.planned,
                    "current": result.current,
                    "status": result.status,
                    **{f"geo_{geo}": count for geo, count in result.by_geo.items()},
                }
            )
    return pd.DataFrame.from_records(records)


def risk_to_frame(buckets: Sequence[RiskBucket]) -> pd.DataFrame:
    return pd.DataFrame.from_records(
        [bucket.as_dict() for bucket in buckets],
        columns=["level", "label", "color", "count", "percentage"],
    )


def summary_tree_to_frame(nodes: Sequence[SummaryNode]) -> pd.DataFrame:
    """Flatten the summary tree depth-first, one row per node."""

    records: list[dict[str, object]] = []

    def _walk(node: SummaryNode, path: tuple[str, ...]) -> None:
        current = path + (node.name,)
        records.append(
            {
                "level": len(current),
                "path": " > ".join(current),
                "name": node.name,
                "count": node.count,
                "pct": round(node.pct, 2),
            }
        )
        for child in node.children or ():
            _walk(child, current)

    for node in nodes:
        _walk(node, ())
    return pd.DataFrame.from_records(records, columns=["level", "path", "name", "count", "pct"])


def save_report(frame: pd.DataFrame, *, reports_dir: Path, name: str) -> Path:
    """Persist ``frame`` as CSV under ``reports_dir``."""

    reports_dir.mkdir(parents=True, exist_ok=True)
    output_path = reports_dir / name
    index = not isinstance(frame.index, pd.RangeIndex)
    frame.to_csv(output_path, index=index)
    return output_path


def plot_coverage_heatmap(matrix: CrossTabMatrix, *, path: Path, title: str | None = None) -> Path:
    """Render the matrix as an annotated heatmap and persist it to ``path``."""

    frame = matrix_to_frame(matrix, include_totals=False)
    values = frame.to_numpy(dtype=float)
    ratios = np.clip(values / float(matrix.max_count), 0.0, 1.0) if values.size else values

    if matrix.dimension == RowDimension.MODEL_NAME.value:
        row_labels = [row.key.label for row in matrix.rows]
    else:
        row_labels = [str(label) for label in frame.index]

    height = max(3.0, 0.4 * len(row_labels) + 1.5)
    width = max(6.0, 1.3 * len(matrix.categories) + 2.5)
    fig, ax = plt.subplots(figsize=(width, height))

    if values.size:
        ax.imshow(ratios, cmap="Blues", vmin=0.0, vmax=1.0, aspect="auto")
        for (row_idx, col_idx), count in np.ndenumerate(values):
            color = "white" if ratios[row_idx, col_idx] >= 0.7 else "black"
            label = str(int(count)) if count else "-"
            ax.text(col_idx, row_idx, label, ha="center", va="center", color=color, fontsize=8)

    ax.set_xticks(range(len(matrix.categories)))
    ax.set_xticklabels(matrix.categories, rotation=30, ha="right")
    ax.set_yticks(range(len(row_labels)))
    ax.set_yticklabels(row_labels)
    ax.set_title(title or f"{RowDimension(matrix.dimension).label} x Category Coverage")

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight", dpi=150)
    plt.close(fig)

    return path


__all__ = [
    "TOTAL_LABEL",
    "brainstorm_to_frame",
    "gaps_to_frame",
    "matrix_to_frame",
    "plot_coverage_heatmap",
    "risk_to_frame",
    "save_report",
    "summary_tree_to_frame",
]
