"""Configuration loading utilities for feature_catalog."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
ENV_PREFIX = "FEATCAT__"


class ConfigError(RuntimeError):
    """Raised when configuration loading or validation fails."""


@dataclass(frozen=True)
class PathsConfig:
    data_dir: str
    features_file: str = "features.json"
    reports_dir: str = "reports"

    @property
    def features_path(self) -> Path:
        return Path(self.data_dir) / self.features_file


@dataclass(frozen=True)
class SourcesConfig:
    remote_url: str = ""
    timeout: float = 10.0


@dataclass(frozen=True)
class ProposalsConfig:
    endpoint_url: str = ""
    timeout: float = 10.0


@dataclass(frozen=True)
class CatalogConfig:
    page_size: int = 50
    gap_threshold: int = 10


@dataclass(frozen=True)
class Config:
    paths: PathsConfig
    sources: SourcesConfig
    proposals: ProposalsConfig
    catalog: CatalogConfig

    def as_dict(self) -> Mapping[str, Any]:
        """Return the configuration as a dictionary for downstream use."""
        return dataclasses.asdict(self)


def load_config(path: str | os.PathLike[str] | None = None) -> Config:
    """Load configuration from YAML and apply environment overrides."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    try:
        raw_config = _load_yaml(config_path)
    except yaml.YAMLError as exc:  # pragma: no cover
        raise ConfigError(f"Invalid YAML in config file '{config_path}': {exc}") from exc

    if not isinstance(raw_config, dict):
        raise ConfigError(
            f"Configuration file '{config_path}' must contain a mapping at the root."
        )

    merged_config = _apply_env_overrides(raw_config)
    return _build_config(merged_config)


def dump_config(config: Config) -> str:
    """Return a YAML string of the effective configuration for debugging."""
    return yaml.safe_dump(config.as_dict(), sort_keys=False)


def _load_yaml(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"Configuration file '{path}' does not exist.")

    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if data is None:
        raise ConfigError(f"Configuration file '{path}' is empty.")

    return data


def _apply_env_overrides(raw_config: dict[str, Any]) -> dict[str, Any]:
    config = dict(raw_config)

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        path_keys = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not path_keys:
            continue

        _set_nested_value(config, path_keys, _parse_env_value(value))

    return config


def _set_nested_value(config: dict[str, Any], keys: list[str], value: Any) -> None:
    target = config
    for key in keys[:-1]:
        if key not in target or not isinstance(target[key], dict):
            target[key] = {}
        else:
            target[key] = dict(target[key])
        target = target[key]
    target[keys[-1]] = value


def _parse_env_value(value: str) -> Any:
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    return parsed


def _build_config(data: Mapping[str, Any]) -> Config:
    try:
        paths_cfg = PathsConfig(**_expect_mapping(data, "paths"))
        sources_cfg = SourcesConfig(**_optional_mapping(data, "sources"))
        proposals_cfg = ProposalsConfig(**_optional_mapping(data, "proposals"))
        catalog_cfg = CatalogConfig(**_optional_mapping(data, "catalog"))
    except TypeError as exc:
        raise ConfigError(f"Configuration structure invalid: {exc}") from exc

    if catalog_cfg.page_size < 1:
        raise ConfigError("catalog.page_size must be at least 1.")

    return Config(
        paths=paths_cfg,
        sources=_normalize_sources(sources_cfg),
        proposals=_normalize_proposals(proposals_cfg),
        catalog=catalog_cfg,
    )


def _normalize_sources(cfg: SourcesConfig) -> SourcesConfig:
    # YAML renders an unset URL as None; treat it as disabled.
    return dataclasses.replace(cfg, remote_url=cfg.remote_url or "")


def _normalize_proposals(cfg: ProposalsConfig) -> ProposalsConfig:
    return dataclasses.replace(cfg, endpoint_url=cfg.endpoint_url or "")


def _expect_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    try:
        value = data[key]
    except KeyError as exc:
        raise ConfigError(f"Missing required configuration section '{key}'.") from exc

    if not isinstance(value, Mapping):
        raise ConfigError(f"Configuration section '{key}' must be a mapping.")

    return value


def _optional_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    if data.get(key) is None:
        return {}
    return _expect_mapping(data, key)


__all__ = [
    "CatalogConfig",
    "Config",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "PathsConfig",
    "ProposalsConfig",
    "SourcesConfig",
    "dump_config",
    "load_config",
]
