from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import pytest
import requests

from feature_catalog.config import load_config
from feature_catalog.ingest.store import (
    SOURCE_REMOTE,
    SOURCE_STATIC,
    FeatureLoadError,
    FeatureStore,
    extract_records,
    load_features,
)

REMOTE_URL = "https://sheets.example.com/features"

STATIC_RECORDS = [
    {"id": 1, "feature_name": "bureau_score", "primary_category": "Bureau", "geo": "US"},
    {"id": 2, "feature_name": "avg_balance", "primary_category": "Cash Flow", "geo": "MX"},
]

REMOTE_RECORDS = [
    {"id": 10, "feature_name": "installed_apps", "primary_category": "Device Data", "shap_rank": 5},
]


@dataclass
class _StubResponse:
    payload: Any
    status_code: int = 200

    def json(self) -> Any:
        return self.payload


class _StubTransport:
    def __init__(self, response: _StubResponse | Exception) -> None:
        self._response = response
        self.calls: list[str] = []

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | tuple[float, float] | None = None,
        **kwargs: Any,
    ) -> _StubResponse:
        self.calls.append(url)
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


@pytest.fixture()
def static_path(tmp_path: Path) -> Path:
    path = tmp_path / "features.json"
    path.write_text(json.dumps(STATIC_RECORDS), encoding="utf-8")
    return path


def test_static_file_is_used_without_remote(static_path: Path) -> None:
    loaded = FeatureStore(static_path=static_path).load()

    assert loaded.source == SOURCE_STATIC
    assert loaded.location == str(static_path)
    assert [feature.id for feature in loaded.features] == [1, 2]


def test_remote_payload_wins_when_available(static_path: Path) -> None:
    transport = _StubTransport(_StubResponse({"data": REMOTE_RECORDS}))
    store = FeatureStore(static_path=static_path, remote_url=REMOTE_URL, transport=transport)

    loaded = store.load()

    assert transport.calls == [REMOTE_URL]
    assert loaded.source == SOURCE_REMOTE
    assert [feature.feature_name for feature in loaded.features] == ["installed_apps"]
    assert loaded.features[0].shap_rank == 5


@pytest.mark.parametrize(
    "response",
    [
        _StubResponse(REMOTE_RECORDS, status_code=503),
        requests.ConnectionError("unreachable"),
        _StubResponse("not a list"),
        _StubResponse([{"feature_name": "no id"}]),
    ],
)
def test_remote_failures_fall_back_to_static(static_path: Path, response, caplog) -> None:
    store = FeatureStore(static_path=static_path, remote_url=REMOTE_URL, transport=_StubTransport(response))

    with caplog.at_level("WARNING"):
        loaded = store.load()

    assert loaded.source == SOURCE_STATIC
    assert len(loaded.features) == 2
    assert "falling back to static data" in caplog.text


def test_missing_static_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FeatureLoadError, match="does not exist"):
        FeatureStore(static_path=tmp_path / "absent.json").load()


def test_invalid_static_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "features.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(FeatureLoadError):
        FeatureStore(static_path=path).load()


def test_extract_records_accepts_wrapped_payloads() -> None:
    assert extract_records({"features": REMOTE_RECORDS}) == REMOTE_RECORDS
    assert extract_records({"data": []}) == []
    with pytest.raises(FeatureLoadError):
        extract_records([1, 2, 3])


def test_load_features_from_config(static_path: Path, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"paths:\n  data_dir: {static_path.parent}\n", encoding="utf-8")

    features = load_features(load_config(config_path))

    assert [feature.feature_name for feature in features] == ["bureau_score", "avg_balance"]
