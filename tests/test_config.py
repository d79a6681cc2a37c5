"""Tests for YAML configuration loading and environment overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from feature_catalog.config import ConfigError, dump_config, load_config

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG = ROOT / "configs" / "default.yaml"


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_default_config_loads() -> None:
    config = load_config(DEFAULT_CONFIG)

    assert config.paths.features_path == Path("data") / "features.json"
    assert config.sources.remote_url == ""
    assert config.proposals.endpoint_url == ""
    assert config.catalog.page_size == 50
    assert config.catalog.gap_threshold == 10


def test_optional_sections_take_defaults(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "paths:\n  data_dir: somewhere\n"))

    assert config.paths.reports_dir == "reports"
    assert config.sources.timeout == 10.0
    assert config.catalog.page_size == 50


def test_env_overrides_nested_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FEATCAT__CATALOG__PAGE_SIZE", "25")
    monkeypatch.setenv("FEATCAT__SOURCES__REMOTE_URL", "https://sheets.example.com/features")

    config = load_config(DEFAULT_CONFIG)

    assert config.catalog.page_size == 25
    assert config.sources.remote_url == "https://sheets.example.com/features"


def test_null_urls_are_normalized(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "paths:\n  data_dir: d\nsources:\n  remote_url:\n"))

    assert config.sources.remote_url == ""


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- not\n- a mapping\n", "mapping at the root"),
        ("sources:\n  timeout: 3\n", "Missing required configuration section 'paths'"),
        ("paths:\n  data_dir: d\n  bogus: 1\n", "structure invalid"),
        ("paths:\n  data_dir: d\ncatalog:\n  page_size: 0\n", "page_size"),
    ],
)
def test_invalid_configs_raise(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        load_config(_write(tmp_path, text))


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "absent.yaml")


def test_dump_config_renders_yaml() -> None:
    rendered = dump_config(load_config(DEFAULT_CONFIG))

    assert "page_size: 50" in rendered
    assert rendered.startswith("paths:")
