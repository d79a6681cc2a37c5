"""Command-line interface for browsing and analysing the feature catalog."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

from feature_catalog.changes.proposals import (
    ProposalClient,
    ProposalSubmissionError,
    ProposalValidationError,
    build_proposal,
)
from feature_catalog.config import DEFAULT_CONFIG_PATH, Config, ConfigError, load_config
from feature_catalog.engine.crosstab import (
    RowDimension,
    build_geo_matrix,
    build_matrix,
    find_coverage_gaps,
    heat_tier,
)
from feature_catalog.engine.filters import (
    EMPTY_FILTERS,
    FilterState,
    active_filter_count,
    apply_filters,
    set_search,
    set_selection,
    set_shap_rank_max,
)
from feature_catalog.engine.gaps import evaluate_brainstorm, risk_distribution
from feature_catalog.engine.summary import summarize
from feature_catalog.engine.table import ASCENDING, DESCENDING, SortState, paginate, sort_features
from feature_catalog.engine.taxonomy import build_taxonomy
from feature_catalog.ingest.store import FeatureLoadError, FeatureStore
from feature_catalog.logging_setup import setup_logging
from feature_catalog.models import Feature, FilterKey
from feature_catalog.ref.framework import KNOWN_GAPS
from feature_catalog.ref.glossary import glossary_payload, lookup_term
from feature_catalog.reporting.export import (
    brainstorm_to_frame,
    gaps_to_frame,
    matrix_to_frame,
    plot_coverage_heatmap,
    risk_to_frame,
    save_report,
    summary_tree_to_frame,
)


app = typer.Typer(help="Browse, filter and analyse the ML feature catalog.")


ConfigOption = typer.Option(
    None, "--config", help="Path to configuration YAML.", exists=True, dir_okay=False
)


def _resolve_config_path(config: Optional[Path]) -> Path:
    return Path(config) if config is not None else DEFAULT_CONFIG_PATH


def _load_config(config: Optional[Path]) -> Config:
    try:
        return load_config(_resolve_config_path(config))
    except ConfigError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _load_features(cfg: Config) -> list[Feature]:
    try:
        return list(FeatureStore.from_config(cfg).load().features)
    except (FeatureLoadError, ValueError) as exc:
        typer.echo(f"Failed to load features: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _build_filters(
    *,
    model: Optional[List[str]] = None,
    user_type: Optional[List[str]] = None,
    geo: Optional[List[str]] = None,
    product: Optional[List[str]] = None,
    category: Optional[List[str]] = None,
    feature_type: Optional[List[str]] = None,
    subtype: Optional[List[str]] = None,
    l3: Optional[List[str]] = None,
    top: Optional[List[str]] = None,
    shap_max: Optional[float] = None,
    search: Optional[str] = None,
) -> FilterState:
    """Translate CLI options into a filter state."""

    filters = EMPTY_FILTERS
    for key, values in (
        (FilterKey.MODEL_NAME, model),
        (FilterKey.USER_TYPE, user_type),
        (FilterKey.GEO, geo),
        (FilterKey.PRODUCT_BUSINESS, product),
        (FilterKey.PRIMARY_CATEGORY, category),
        (FilterKey.FEATURE_TYPE, feature_type),
        (FilterKey.FEATURE_SUBTYPE, subtype),
        (FilterKey.FEATURE_L3, l3),
        (FilterKey.TOP_20_50, top),
    ):
        if values:
            filters = set_selection(filters, key, values)
    if shap_max is not None:
        filters = set_shap_rank_max(filters, shap_max)
    if search:
        filters = set_search(filters, search)
    return filters


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


ModelOption = typer.Option(None, "--model", help="Model name; repeat to select several.")
UserTypeOption = typer.Option(None, "--user-type", help="User type; repeatable.")
GeoOption = typer.Option(None, "--geo", help="Geography; repeatable.")
ProductOption = typer.Option(None, "--product", help="Product line; repeatable.")
CategoryOption = typer.Option(None, "--category", help="Primary category; repeatable.")
TypeOption = typer.Option(None, "--type", help="Feature type; repeatable.")
SubtypeOption = typer.Option(None, "--subtype", help="Feature subtype; repeatable.")
L3Option = typer.Option(None, "--l3", help="Feature L3; repeatable.")
TopOption = typer.Option(None, "--top", help="Top-rank flag, e.g. 'Top 20'; repeatable.")
ShapMaxOption = typer.Option(None, "--shap-max", help="Keep features ranked at or below this SHAP rank.")
SearchOption = typer.Option(None, "--search", help="Case-insensitive text in name or description.")


@app.command()
def explore(
    model: Optional[List[str]] = ModelOption,
    user_type: Optional[List[str]] = UserTypeOption,
    geo: Optional[List[str]] = GeoOption,
    product: Optional[List[str]] = ProductOption,
    category: Optional[List[str]] = CategoryOption,
    feature_type: Optional[List[str]] = TypeOption,
    subtype: Optional[List[str]] = SubtypeOption,
    l3: Optional[List[str]] = L3Option,
    top: Optional[List[str]] = TopOption,
    shap_max: Optional[float] = ShapMaxOption,
    search: Optional[str] = SearchOption,
    sort: str = typer.Option("feature_name", help="Field to sort by."),
    descending: bool = typer.Option(False, "--desc", help="Sort in descending order."),
    page: int = typer.Option(0, min=0, help="Zero-based page number."),
    page_size: Optional[int] = typer.Option(None, min=1, help="Rows per page (defaults to config)."),
    config: Optional[Path] = ConfigOption,
) -> None:
    """List the features matching the filters, sorted and paginated."""

    setup_logging()
    cfg = _load_config(config)
    features = _load_features(cfg)
    filters = _build_filters(
        model=model,
        user_type=user_type,
        geo=geo,
        product=product,
        category=category,
        feature_type=feature_type,
        subtype=subtype,
        l3=l3,
        top=top,
        shap_max=shap_max,
        search=search,
    )

    try:
        ordered = sort_features(
            apply_filters(features, filters),
            SortState(key=sort, direction=DESCENDING if descending else ASCENDING),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--sort") from exc

    result = paginate(ordered, page=page, page_size=page_size or cfg.catalog.page_size)
    payload = result.as_dict()
    payload["filters"] = filters.as_dict()
    payload["active_filter_count"] = active_filter_count(filters)
    _echo_json(payload)


@app.command()
def summary(
    model: Optional[List[str]] = ModelOption,
    geo: Optional[List[str]] = GeoOption,
    product: Optional[List[str]] = ProductOption,
    category: Optional[List[str]] = CategoryOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print KPIs, the category distribution and the summary tree."""

    setup_logging()
    cfg = _load_config(config)
    features = _load_features(cfg)
    filters = _build_filters(model=model, geo=geo, product=product, category=category)
    _echo_json(summarize(apply_filters(features, filters)).as_dict())


@app.command()
def taxonomy(config: Optional[Path] = ConfigOption) -> None:
    """Print the navigation trees built from the full catalog."""

    setup_logging()
    cfg = _load_config(config)
    _echo_json(build_taxonomy(_load_features(cfg)).as_dict())


@app.command()
def matrix(
    dimension: RowDimension = typer.Option(RowDimension.GEO, help="Row dimension of the matrix."),
    model: Optional[List[str]] = ModelOption,
    geo: Optional[List[str]] = GeoOption,
    product: Optional[List[str]] = ProductOption,
    category: Optional[List[str]] = CategoryOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print a dimension x category coverage matrix with heat tiers."""

    setup_logging()
    cfg = _load_config(config)
    features = apply_filters(
        _load_features(cfg),
        _build_filters(model=model, geo=geo, product=product, category=category),
    )
    result = build_matrix(features, dimension)
    payload = result.as_dict()
    for row_payload, row in zip(payload["rows"], result.rows):
        row_payload["heat"] = {
            category_name: heat_tier(count, result.max_count)
            for category_name, count in row.cells.items()
        }
    _echo_json(payload)


@app.command()
def gaps(
    model: Optional[List[str]] = ModelOption,
    geo: Optional[List[str]] = GeoOption,
    product: Optional[List[str]] = ProductOption,
    category: Optional[List[str]] = CategoryOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print coverage gaps, brainstorm progress and the manipulation-risk split."""

    setup_logging()
    cfg = _load_config(config)
    features = apply_filters(
        _load_features(cfg),
        _build_filters(model=model, geo=geo, product=product, category=category),
    )
    geo_matrix = build_geo_matrix(features)
    _echo_json(
        {
            "geo_matrix": geo_matrix.as_dict(),
            "coverage_gaps": [
                {"geo": gap.geo, "category": gap.category, "count": gap.count}
                for gap in find_coverage_gaps(geo_matrix, threshold=cfg.catalog.gap_threshold)
            ],
            "brainstorm": [section.as_dict() for section in evaluate_brainstorm(features)],
            "risk": [bucket.as_dict() for bucket in risk_distribution(features)],
            "known_gaps": [gap.as_dict() for gap in KNOWN_GAPS],
        }
    )


@app.command()
def glossary(term: Optional[str] = typer.Argument(None, help="Look up a single term.")) -> None:
    """Print the credit-decisioning glossary."""

    if term is None:
        _echo_json(glossary_payload())
        return

    definition = lookup_term(term)
    if definition is None:
        typer.echo(f"No definition found for '{term}'.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{definition.term}: {definition.description}")


@app.command()
def propose(
    feature_id: int = typer.Argument(..., help="Id of the feature to change."),
    field: str = typer.Option("primary_category", help="Field to change, or 'comment_only'."),
    new_value: str = typer.Option("", help="Proposed value."),
    name: str = typer.Option(..., "--name", help="Your name."),
    email: str = typer.Option("", "--email", help="Your email."),
    comment: str = typer.Option(..., "--comment", help="Reason for the change."),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Submit a taxonomy change proposal for one feature."""

    setup_logging()
    cfg = _load_config(config)
    features = {feature.id: feature for feature in _load_features(cfg)}
    feature = features.get(feature_id)
    if feature is None:
        raise typer.BadParameter(f"No feature with id {feature_id}.", param_hint="FEATURE_ID")

    try:
        proposal = build_proposal(
            feature,
            field_changed=field,
            new_value=new_value,
            proposer_name=name,
            proposer_email=email,
            comment=comment,
        )
        status = ProposalClient.from_config(cfg).submit(proposal)
    except ProposalValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except ProposalSubmissionError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Proposal {status}: {proposal.field_changed} on '{proposal.feature_name}'")


@app.command()
def export(
    reports_dir: Optional[Path] = typer.Option(None, help="Output directory (defaults to config)."),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Write matrices, gaps, brainstorm, risk and summary reports to disk."""

    setup_logging()
    cfg = _load_config(config)
    features = _load_features(cfg)
    output_dir = reports_dir or Path(cfg.paths.reports_dir)

    written = []
    for dimension in RowDimension:
        frame = matrix_to_frame(build_matrix(features, dimension))
        written.append(save_report(frame, reports_dir=output_dir, name=f"matrix_{dimension.value}.csv"))

    geo_matrix = build_geo_matrix(features)
    coverage_gaps = find_coverage_gaps(geo_matrix, threshold=cfg.catalog.gap_threshold)
    written.append(save_report(gaps_to_frame(coverage_gaps), reports_dir=output_dir, name="coverage_gaps.csv"))
    written.append(
        save_report(brainstorm_to_frame(evaluate_brainstorm(features)), reports_dir=output_dir, name="brainstorm.csv")
    )
    written.append(save_report(risk_to_frame(risk_distribution(features)), reports_dir=output_dir, name="risk.csv"))
    written.append(
        save_report(summary_tree_to_frame(summarize(features).tree), reports_dir=output_dir, name="summary_tree.csv")
    )
    written.append(plot_coverage_heatmap(geo_matrix, path=output_dir / "geo_heatmap.png"))

    for path in written:
        typer.echo(f"Wrote {path}")


if __name__ == "__main__":  # pragma: no cover
    app()
