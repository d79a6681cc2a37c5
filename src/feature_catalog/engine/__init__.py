"""In-memory analytical engine over the feature collection."""

from .crosstab import (
    CrossTabMatrix,
    RowDimension,
    build_geo_matrix,
    build_matrix,
    find_coverage_gaps,
    heat_ratio,
    heat_tier,
)
from .filters import (
    EMPTY_FILTERS,
    FilterState,
    active_filter_count,
    apply_filters,
    clear_all_filters,
    clear_filter,
    clear_shap_filter,
    filter_options,
    set_search,
    set_shap_rank_max,
    toggle_filter,
)
from .gaps import evaluate_brainstorm, gap_status, risk_distribution
from .summary import SummaryStructures, summarize
from .table import SortState, next_sort, paginate, sort_features
from .taxonomy import TaxonomyStructures, build_taxonomy

__all__ = [
    "CrossTabMatrix",
    "EMPTY_FILTERS",
    "FilterState",
    "RowDimension",
    "SortState",
    "SummaryStructures",
    "TaxonomyStructures",
    "active_filter_count",
    "apply_filters",
    "build_geo_matrix",
    "build_matrix",
    "build_taxonomy",
    "clear_all_filters",
    "clear_filter",
    "clear_shap_filter",
    "evaluate_brainstorm",
    "filter_options",
    "find_coverage_gaps",
    "gap_status",
    "heat_ratio",
    "heat_tier",
    "next_sort",
    "paginate",
    "risk_distribution",
    "set_search",
    "set_shap_rank_max",
    "sort_features",
    "summarize",
    "toggle_filter",
]
