"""Change proposals for feature taxonomy corrections."""

from .proposals import (
    ChangeProposal,
    ProposalClient,
    ProposalSubmissionError,
    ProposalValidationError,
    build_proposal,
)

__all__ = [
    "ChangeProposal",
    "ProposalClient",
    "ProposalSubmissionError",
    "ProposalValidationError",
    "build_proposal",
]
