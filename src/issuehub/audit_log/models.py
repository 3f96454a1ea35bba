"""Data models for Audit Log."""

from dataclasses import dataclass
from enum import Enum


class AuditOutcome(str, Enum):
    """Result of recording one audit entry."""

    COMMITTED = "committed"
    UNCHANGED = "unchanged"
    FAILED = "failed"
    DISABLED = "disabled"


@dataclass
class AuditEntry:
    """One line of the audit trail."""

    sha: str
    summary: str

    def __str__(self) -> str:
        return f"{self.sha} {self.summary}"
