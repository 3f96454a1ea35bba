"""SnapshotStore - in-memory issue mirror with a durable SQLite copy."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from issuehub.snapshot_store.database import Database
from issuehub.snapshot_store.exceptions import (
    InvalidSnapshotError,
    IssueNotFoundError,
    PersistenceError,
)
from issuehub.snapshot_store.models import SNAPSHOT_ROW_ID, Issue, SnapshotRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger("issuehub.snapshot_store")


def encode_snapshot(issues: Iterable[Issue]) -> str:
    """Serialize issues to the persisted ``{"issues": [...]}`` document."""
    return json.dumps({"issues": [issue.to_dict() for issue in issues]}, indent=2)


def decode_snapshot(payload: str) -> list[Issue]:
    """Parse a persisted snapshot document.

    Raises:
        InvalidSnapshotError: If the payload is empty, not JSON, or any issue
            record is malformed or duplicated.
    """
    if not payload or not payload.strip():
        raise InvalidSnapshotError("Snapshot payload is empty")
    try:
        document: Any = json.loads(payload)
        issues = [Issue.from_dict(item) for item in document["issues"]]
    except (ValueError, KeyError, TypeError) as e:
        raise InvalidSnapshotError(f"Snapshot payload is invalid: {e}") from e

    ids = [issue.id for issue in issues]
    if len(ids) != len(set(ids)):
        raise InvalidSnapshotError("Snapshot contains duplicate issue ids")
    return issues


class SnapshotStore:
    """Holds the current mirror of issues.

    Writes come from exactly two places: the reconciler swaps the whole mirror
    with ``replace_all`` and the local-fallback path adds single issues with
    ``upsert_local``. Both rebind the mirror to a fresh dict, so a reader never
    sees a half-applied change.
    """

    def __init__(self, db_path: str = "issuehub.db") -> None:
        """Open (or create) the backing database. Call ``load()`` to read it.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self._db = Database(db_path)
        self._open_database()
        self._issues: dict[int, Issue] = {}

    def _open_database(self) -> None:
        """Create the schema, replacing a database file SQLite cannot read."""
        try:
            self._db.create_tables()
        except SQLAlchemyError as e:
            moved = self._db.discard()
            logger.error(
                "Snapshot database unreadable, starting empty (moved aside: %s): %s",
                ", ".join(str(p) for p in moved) or "nothing",
                e,
            )
            self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Reads ---

    def get(self, issue_id: int) -> Issue | None:
        return self._issues.get(issue_id)

    def require(self, issue_id: int) -> Issue:
        """Get an issue that must exist.

        Raises:
            IssueNotFoundError: If the id is not in the mirror
        """
        issue = self._issues.get(issue_id)
        if issue is None:
            raise IssueNotFoundError(f"Issue #{issue_id} not found")
        return issue

    def all(self) -> list[Issue]:
        """All issues in the mirror, ordered by id."""
        return [self._issues[key] for key in sorted(self._issues)]

    def __len__(self) -> int:
        return len(self._issues)

    def next_local_id(self) -> int:
        """Next id for a locally created issue: highest id plus one, 1 when empty."""
        return max(self._issues, default=0) + 1

    # --- Writes ---

    def replace_all(self, issues: Iterable[Issue]) -> None:
        """Swap the whole mirror for ``issues``.

        Raises:
            ValueError: If two issues share an id. The mirror is left untouched.
        """
        replacement: dict[int, Issue] = {}
        for issue in issues:
            if issue.id in replacement:
                raise ValueError(f"Duplicate issue id {issue.id} in replacement set")
            replacement[issue.id] = issue
        self._issues = replacement
        logger.debug("Mirror replaced with %d issue(s)", len(replacement))

    def upsert_local(self, issue: Issue) -> None:
        """Insert or overwrite one issue."""
        updated = dict(self._issues)
        updated[issue.id] = issue
        self._issues = updated
        logger.debug("Upserted issue #%d", issue.id)

    # --- Durability ---

    def persist(self) -> bool:
        """Write the current mirror to the database in one transaction.

        Failures are logged, never raised: the in-memory mirror stays
        authoritative until the next successful write.

        Returns:
            True if the snapshot was written.
        """
        payload = encode_snapshot(self.all())
        try:
            self._write(payload)
        except PersistenceError as e:
            logger.error("Failed to persist snapshot: %s", e)
            return False
        logger.debug("Persisted snapshot (%d issue(s))", len(self._issues))
        return True

    def load(self) -> list[Issue]:
        """Read the durable snapshot into memory.

        A missing, empty or corrupt snapshot is not fatal: the mirror becomes
        empty and that default is written back.

        Returns:
            The issues now held in memory.
        """
        try:
            payload = self._read()
            issues = decode_snapshot(payload) if payload is not None else None
        except (PersistenceError, InvalidSnapshotError) as e:
            logger.warning("Snapshot unreadable, reinitializing: %s", e)
            issues = None

        if issues is None:
            logger.info("Initializing empty snapshot")
            self._issues = {}
            self.persist()
        else:
            self._issues = {issue.id: issue for issue in issues}
            logger.info("Loaded snapshot with %d issue(s)", len(self._issues))
        return self.all()

    def _read(self) -> str | None:
        try:
            with self._db.transaction() as session:
                record = session.get(SnapshotRecord, SNAPSHOT_ROW_ID)
                return record.payload if record is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read snapshot: {e}") from e

    def _write(self, payload: str) -> None:
        try:
            with self._db.transaction() as session:
                record = session.get(SnapshotRecord, SNAPSHOT_ROW_ID)
                if record is None:
                    session.add(SnapshotRecord(id=SNAPSHOT_ROW_ID, payload=payload))
                else:
                    record.payload = payload
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write snapshot: {e}") from e
