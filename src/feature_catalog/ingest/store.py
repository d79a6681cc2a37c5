"""Feature inventory acquisition.

The inventory is maintained in a spreadsheet published through a JSON
endpoint. When that endpoint is configured the store tries it first and falls
back to the static ``features.json`` snapshot under the data directory on any
failure, so the catalog stays browsable when the spreadsheet is unreachable.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol

import requests

from feature_catalog.config import Config, load_config
from feature_catalog.models import Feature

from .contracts import records_to_features


LOGGER = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_STATIC = "static"


class ResponseProtocol(Protocol):
    """Protocol describing the subset of ``requests.Response`` that we use."""

    status_code: int

    def json(self) -> Any:  # pragma: no cover - interface declaration
        """Return the decoded JSON payload."""


class TransportProtocol(Protocol):
    """Protocol describing the transport used by :class:`FeatureStore`."""

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | tuple[float, float] | None = None,
        **kwargs: Any,
    ) -> ResponseProtocol:  # pragma: no cover - interface declaration
        """Perform an HTTP request and return a response object."""


class FeatureLoadError(RuntimeError):
    """Raised when no configured source yields a feature inventory."""


@dataclass(frozen=True)
class LoadedFeatures:
    features: tuple[Feature, ...]
    source: str
    location: str


def extract_records(payload: Any) -> list[dict]:
    """Accept a bare array or an object wrapping it under ``data`` or ``features``."""

    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, Mapping):
        records = payload.get("data") or payload.get("features") or []
    else:
        raise FeatureLoadError(f"Unexpected feature payload type: {type(payload).__name__}.")

    if not isinstance(records, list) or not all(isinstance(item, Mapping) for item in records):
        raise FeatureLoadError("Feature payload must be a list of JSON objects.")
    return [dict(item) for item in records]


class FeatureStore:
    """Loads the feature inventory from the remote endpoint or the static file."""

    def __init__(
        self,
        *,
        static_path: str | Path,
        remote_url: str = "",
        timeout: float = 10.0,
        transport: TransportProtocol | None = None,
    ) -> None:
        self.static_path = Path(static_path)
        self.remote_url = remote_url
        self._timeout = timeout
        self._transport = transport
        self._session: requests.Session | None = None

    @classmethod
    def from_config(cls, config: Config | None = None, **kwargs: Any) -> "FeatureStore":
        cfg = config or load_config()
        return cls(
            static_path=cfg.paths.features_path,
            remote_url=cfg.sources.remote_url,
            timeout=cfg.sources.timeout,
            **kwargs,
        )

    def load(self) -> LoadedFeatures:
        """Return the inventory from the first source that succeeds."""

        if self.remote_url:
            try:
                features = records_to_features(self._fetch_remote())
            except (requests.RequestException, ValueError, FeatureLoadError) as exc:
                LOGGER.warning(
                    "Failed to fetch features from %s, falling back to static data: %s",
                    self.remote_url,
                    exc,
                )
            else:
                LOGGER.info("Loaded %d features from %s", len(features), self.remote_url)
                return LoadedFeatures(tuple(features), SOURCE_REMOTE, self.remote_url)

        records = self._read_static()
        features = records_to_features(records)
        LOGGER.info("Loaded %d features from %s", len(features), self.static_path)
        return LoadedFeatures(tuple(features), SOURCE_STATIC, str(self.static_path))

    def _fetch_remote(self) -> list[dict]:
        transport = self._transport or self._get_session()
        response = transport.request(
            "GET",
            self.remote_url,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
        )
        if response.status_code >= 400:
            raise FeatureLoadError(f"Feature endpoint returned status {response.status_code}.")
        return extract_records(response.json())

    def _read_static(self) -> list[dict]:
        if not self.static_path.exists():
            raise FeatureLoadError(f"Failed to load features: '{self.static_path}' does not exist.")
        try:
            with self.static_path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except json.JSONDecodeError as exc:
            raise FeatureLoadError(f"Failed to load features from '{self.static_path}': {exc}") from exc
        return extract_records(payload)

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session


def load_features(config: Config | None = None) -> list[Feature]:
    """Convenience wrapper returning only the loaded features."""

    return list(FeatureStore.from_config(config).load().features)


__all__ = [
    "FeatureLoadError",
    "FeatureStore",
    "LoadedFeatures",
    "SOURCE_REMOTE",
    "SOURCE_STATIC",
    "extract_records",
    "load_features",
]
