"""Coordinator - Applies client mutations remotely or locally."""

from issuehub.coordinator.coordinator import MutationCoordinator
from issuehub.coordinator.exceptions import CoordinatorError, MalformedIntentError
from issuehub.coordinator.intents import (
    AddCommentIntent,
    CreateIssueIntent,
    FetchCommentsIntent,
    Intent,
    UpdateStatusIntent,
    parse_intent,
)
from issuehub.coordinator.models import MutationOutcome, MutationResult

__all__ = [
    "AddCommentIntent",
    "CoordinatorError",
    "CreateIssueIntent",
    "FetchCommentsIntent",
    "Intent",
    "MalformedIntentError",
    "MutationCoordinator",
    "MutationOutcome",
    "MutationResult",
    "UpdateStatusIntent",
    "parse_intent",
]
