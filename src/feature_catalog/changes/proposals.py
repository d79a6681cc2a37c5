"""Taxonomy change proposals submitted by catalog readers."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Protocol

import requests

from feature_catalog.config import Config, load_config
from feature_catalog.models import Feature


LOGGER = logging.getLogger(__name__)

COMMENT_ONLY = "comment_only"

CHANGEABLE_FIELDS: dict[str, str] = {
    "primary_category": "Primary Category",
    "feature_type": "Feature Type",
    "feature_subtype": "Feature Subtype",
    "feature_l3": "Feature L3",
}

STATUS_SUBMITTED = "submitted"
STATUS_SIMULATED = "simulated"


class TransportProtocol(Protocol):
    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | tuple[float, float] | None = None,
    ) -> Any:  # pragma: no cover - interface declaration
        """Perform an HTTP request and return a response object."""


class ProposalValidationError(ValueError):
    """Raised when a proposal is missing required input."""


class ProposalSubmissionError(RuntimeError):
    """Raised when the proposal endpoint rejects or cannot receive a proposal."""


@dataclass(frozen=True)
class ChangeProposal:
    feature_id: str
    feature_name: str
    field_changed: str
    old_value: str
    new_value: str
    proposer_name: str
    proposer_email: str
    comment: str

    def as_payload(self) -> dict[str, str]:
        return asdict(self)


def _current_value(feature: Feature, field_name: str) -> str:
    if field_name == "primary_category":
        return feature.primary_category
    if field_name == "feature_type":
        return feature.feature_type
    if field_name == "feature_subtype":
        return feature.feature_subtype
    if field_name == "feature_l3":
        return feature.feature_l3
    return ""


def build_proposal(
    feature: Feature,
    *,
    field_changed: str,
    new_value: str,
    proposer_name: str,
    comment: str,
    proposer_email: str = "",
) -> ChangeProposal:
    """Validate user input and assemble the proposal payload.

    Raises
    ------
    ProposalValidationError
        When the field is not changeable, the proposer name or the comment is
        blank, or a new value is missing for a field change.
    """

    if field_changed != COMMENT_ONLY and field_changed not in CHANGEABLE_FIELDS:
        allowed = ", ".join([*CHANGEABLE_FIELDS, COMMENT_ONLY])
        raise ProposalValidationError(f"Field '{field_changed}' cannot be changed. Expected one of: {allowed}.")
    if not proposer_name.strip():
        raise ProposalValidationError("Please enter your name")
    if field_changed != COMMENT_ONLY and not new_value.strip():
        raise ProposalValidationError("Please enter a new value")
    if not comment.strip():
        raise ProposalValidationError("Please provide a reason")

    return ChangeProposal(
        feature_id=str(feature.id),
        feature_name=feature.feature_name,
        field_changed=field_changed,
        old_value=_current_value(feature, field_changed),
        new_value="" if field_changed == COMMENT_ONLY else new_value,
        proposer_name=proposer_name,
        proposer_email=proposer_email,
        comment=comment,
    )


class ProposalClient:
    """Posts proposals to the configured endpoint.

    Without an endpoint the submission is logged and reported as simulated so
    the flow can be exercised locally.
    """

    def __init__(
        self,
        *,
        endpoint_url: str = "",
        timeout: float = 10.0,
        transport: TransportProtocol | None = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: Config | None = None, **kwargs: Any) -> "ProposalClient":
        cfg = config or load_config()
        return cls(endpoint_url=cfg.proposals.endpoint_url, timeout=cfg.proposals.timeout, **kwargs)

    def submit(self, proposal: ChangeProposal) -> str:
        """Send ``proposal`` and return ``"submitted"`` or ``"simulated"``."""

        payload = proposal.as_payload()
        if not self.endpoint_url:
            LOGGER.info("Change proposal (simulated): %s", payload)
            return STATUS_SIMULATED

        transport = self._transport or requests
        try:
            response = transport.request(
                "POST",
                self.endpoint_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ProposalSubmissionError("Failed to submit. Please try again.") from exc

        status = getattr(response, "status_code", 200)
        if status >= 400:
            raise ProposalSubmissionError(f"Proposal endpoint returned status {status}.")

        LOGGER.info("Submitted change proposal for feature %s", proposal.feature_id)
        return STATUS_SUBMITTED


__all__ = [
    "CHANGEABLE_FIELDS",
    "COMMENT_ONLY",
    "ChangeProposal",
    "ProposalClient",
    "ProposalSubmissionError",
    "ProposalValidationError",
    "STATUS_SIMULATED",
    "STATUS_SUBMITTED",
    "build_proposal",
]
