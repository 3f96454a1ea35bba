"""Audit Log - Git-backed, append-only record of accepted changes."""

from issuehub.audit_log.exceptions import (
    AuditLogError,
    CommitError,
    NothingToCommitError,
    RepositoryError,
)
from issuehub.audit_log.log import AuditLog
from issuehub.audit_log.models import AuditEntry, AuditOutcome

__all__ = [
    "AuditEntry",
    "AuditLog",
    "AuditLogError",
    "AuditOutcome",
    "CommitError",
    "NothingToCommitError",
    "RepositoryError",
]
