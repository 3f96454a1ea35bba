"""Data models for the Mutation Coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issuehub.snapshot_store import Comment, Issue


class MutationOutcome(str, Enum):
    """Terminal state of one mutation intent."""

    REMOTE_SUCCEEDED = "remote_succeeded"  # follow-up resync scheduled
    APPLIED_LOCALLY = "applied_locally"
    SKIPPED = "skipped"  # remote unconfigured and no local path exists
    FAILED = "failed"


@dataclass
class MutationResult:
    """What happened to a mutation intent.

    Attributes:
        outcome: Terminal state of the intent.
        issue: The created issue, for local creates.
        comments: Comments returned by a fetch.
        error: Remote failure reason, if any.
    """

    outcome: MutationOutcome
    issue: Issue | None = None
    comments: list[Comment] | None = None
    error: str | None = None
