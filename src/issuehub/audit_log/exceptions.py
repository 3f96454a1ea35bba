"""Custom exceptions for Audit Log."""


class AuditLogError(Exception):
    """Base exception for Audit Log errors."""


class RepositoryError(AuditLogError):
    """The audit repository could not be initialized or read."""


class CommitError(AuditLogError):
    """Writing or committing an audit entry failed."""


class NothingToCommitError(AuditLogError):
    """The snapshot is unchanged since the last entry; no commit was made."""
