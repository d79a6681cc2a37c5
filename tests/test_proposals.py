"""Tests for taxonomy change proposals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import pytest
import requests

from feature_catalog.changes.proposals import (
    COMMENT_ONLY,
    STATUS_SIMULATED,
    STATUS_SUBMITTED,
    ProposalClient,
    ProposalSubmissionError,
    ProposalValidationError,
    build_proposal,
)
from feature_catalog.models import Feature

ENDPOINT = "https://hooks.example.com/proposals"


@pytest.fixture()
def feature() -> Feature:
    return Feature(
        id=42,
        feature_name="installed_lending_apps",
        primary_category="Device Data",
        feature_type="App Ecosystem",
    )


@dataclass
class _StubResponse:
    status_code: int = 200


class _RecordingTransport:
    def __init__(self, response: _StubResponse | Exception) -> None:
        self._response = response
        self.requests: list[dict[str, Any]] = []

    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | tuple[float, float] | None = None,
    ) -> _StubResponse:
        self.requests.append({"method": method, "url": url, "json": json, "headers": headers})
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


def _proposal(feature: Feature, **overrides: str):
    kwargs = {
        "field_changed": "primary_category",
        "new_value": "Platform Data",
        "proposer_name": "Ada",
        "comment": "App inventory is platform telemetry",
    }
    kwargs.update(overrides)
    return build_proposal(feature, **kwargs)


def test_build_proposal_captures_old_value(feature: Feature) -> None:
    proposal = _proposal(feature)

    assert proposal.feature_id == "42"
    assert proposal.old_value == "Device Data"
    assert proposal.new_value == "Platform Data"
    assert proposal.as_payload()["feature_name"] == "installed_lending_apps"


def test_comment_only_needs_no_new_value(feature: Feature) -> None:
    proposal = _proposal(feature, field_changed=COMMENT_ONLY, new_value="ignored")

    assert proposal.old_value == ""
    assert proposal.new_value == ""


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"proposer_name": "  "}, "Please enter your name"),
        ({"new_value": ""}, "Please enter a new value"),
        ({"comment": ""}, "Please provide a reason"),
        ({"field_changed": "geo"}, "cannot be changed"),
    ],
)
def test_build_proposal_validation(feature: Feature, overrides: dict[str, str], message: str) -> None:
    with pytest.raises(ProposalValidationError, match=message):
        _proposal(feature, **overrides)


def test_submit_without_endpoint_is_simulated(feature: Feature, caplog) -> None:
    client = ProposalClient()

    with caplog.at_level("INFO"):
        status = client.submit(_proposal(feature))

    assert status == STATUS_SIMULATED
    assert "simulated" in caplog.text


def test_submit_posts_json_payload(feature: Feature) -> None:
    transport = _RecordingTransport(_StubResponse())
    client = ProposalClient(endpoint_url=ENDPOINT, transport=transport)

    status = client.submit(_proposal(feature))

    assert status == STATUS_SUBMITTED
    (sent,) = transport.requests
    assert sent["method"] == "POST"
    assert sent["url"] == ENDPOINT
    assert sent["json"]["field_changed"] == "primary_category"
    assert sent["headers"]["Content-Type"] == "application/json"


@pytest.mark.parametrize(
    "response",
    [_StubResponse(status_code=500), requests.Timeout("slow")],
)
def test_submit_failures_raise(feature: Feature, response) -> None:
    client = ProposalClient(endpoint_url=ENDPOINT, transport=_RecordingTransport(response))

    with pytest.raises(ProposalSubmissionError):
        client.submit(_proposal(feature))
