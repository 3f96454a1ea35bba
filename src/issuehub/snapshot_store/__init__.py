"""Snapshot Store - In-memory issue mirror with durable persistence."""

from issuehub.snapshot_store.exceptions import (
    InvalidSnapshotError,
    IssueNotFoundError,
    PersistenceError,
    SnapshotStoreError,
)
from issuehub.snapshot_store.models import (
    Comment,
    Issue,
    IssueStatus,
    format_timestamp,
    parse_timestamp,
    utcnow,
)
from issuehub.snapshot_store.store import SnapshotStore, decode_snapshot, encode_snapshot

__all__ = [
    "Comment",
    "InvalidSnapshotError",
    "Issue",
    "IssueNotFoundError",
    "IssueStatus",
    "PersistenceError",
    "SnapshotStore",
    "SnapshotStoreError",
    "decode_snapshot",
    "encode_snapshot",
    "format_timestamp",
    "parse_timestamp",
    "utcnow",
]
