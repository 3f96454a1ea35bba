"""Custom exceptions for Snapshot Store."""


class SnapshotStoreError(Exception):
    """Base exception for Snapshot Store errors."""


class PersistenceError(SnapshotStoreError):
    """Durable read or write of the snapshot failed."""


class InvalidSnapshotError(SnapshotStoreError):
    """Persisted snapshot document could not be decoded."""


class IssueNotFoundError(SnapshotStoreError):
    """Issue with given ID is not in the mirror."""
