"""Reporting utilities for catalog matrices, gaps and summaries."""

from .export import (
    brainstorm_to_frame,
    gaps_to_frame,
    matrix_to_frame,
    plot_coverage_heatmap,
    risk_to_frame,
    save_report,
    summary_tree_to_frame,
)

__all__ = [
    "brainstorm_to_frame",
    "gaps_to_frame",
    "matrix_to_frame",
    "plot_coverage_heatmap",
    "risk_to_frame",
    "save_report",
    "summary_tree_to_frame",
]
