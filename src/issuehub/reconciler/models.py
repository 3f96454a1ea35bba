"""Data models for the Reconciler."""

from dataclasses import dataclass
from enum import Enum


class ResyncStatus(str, Enum):
    """How a resync attempt ended."""

    SYNCED = "synced"
    SKIPPED = "skipped"  # remote not configured
    FAILED = "failed"  # remote unavailable, mirror left as it was


@dataclass
class ResyncResult:
    """Result of a resync.

    Attributes:
        status: How the attempt ended.
        issue_count: Issues in the mirror after a successful pull.
        error: Failure reason when status is FAILED.
    """

    status: ResyncStatus
    issue_count: int = 0
    error: str | None = None
