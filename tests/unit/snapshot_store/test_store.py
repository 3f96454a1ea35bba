"""Unit tests for SnapshotStore operations."""

import json
from unittest.mock import patch

import pytest

from issuehub.snapshot_store import (
    InvalidSnapshotError,
    Issue,
    IssueNotFoundError,
    PersistenceError,
    SnapshotStore,
    decode_snapshot,
    encode_snapshot,
)
from issuehub.snapshot_store.models import SNAPSHOT_ROW_ID, SnapshotRecord


def _issue(issue_id: int, title: str = "") -> Issue:
    return Issue(id=issue_id, title=title or f"Issue {issue_id}", created_by="alice")


def _write_raw(store: SnapshotStore, payload: str) -> None:
    with store._db.transaction() as session:
        record = session.get(SnapshotRecord, SNAPSHOT_ROW_ID)
        if record is None:
            session.add(SnapshotRecord(id=SNAPSHOT_ROW_ID, payload=payload))
        else:
            record.payload = payload


@pytest.mark.unit
class TestReads:
    """Tests for get / all / require."""

    def test_all_is_ordered_by_id(self, store: SnapshotStore) -> None:
        store.upsert_local(_issue(3))
        store.upsert_local(_issue(1))
        store.upsert_local(_issue(2))

        assert [i.id for i in store.all()] == [1, 2, 3]

    def test_get_missing_returns_none(self, store: SnapshotStore) -> None:
        assert store.get(42) is None

    def test_require_missing_raises(self, store: SnapshotStore) -> None:
        with pytest.raises(IssueNotFoundError):
            store.require(42)

    def test_all_returns_a_copy(self, store: SnapshotStore) -> None:
        """Mutating the returned list doesn't touch the mirror."""
        store.upsert_local(_issue(1))

        store.all().clear()

        assert len(store) == 1


@pytest.mark.unit
class TestNextLocalId:
    """Tests for local id assignment."""

    def test_starts_at_one(self, store: SnapshotStore) -> None:
        assert store.next_local_id() == 1

    def test_is_max_plus_one(self, store: SnapshotStore) -> None:
        """Gaps left by remote numbering are not reused."""
        store.replace_all([_issue(4), _issue(9)])

        assert store.next_local_id() == 10


@pytest.mark.unit
class TestWrites:
    """Tests for replace_all / upsert_local."""

    def test_replace_all_swaps_everything(self, store: SnapshotStore) -> None:
        store.upsert_local(_issue(1))

        store.replace_all([_issue(5), _issue(6)])

        assert [i.id for i in store.all()] == [5, 6]

    def test_replace_all_rejects_duplicates(self, store: SnapshotStore) -> None:
        """Duplicate ids leave the previous mirror in place."""
        store.upsert_local(_issue(1))

        with pytest.raises(ValueError, match="Duplicate"):
            store.replace_all([_issue(2), _issue(2)])

        assert [i.id for i in store.all()] == [1]

    def test_upsert_overwrites_same_id(self, store: SnapshotStore) -> None:
        store.upsert_local(_issue(1, "old"))
        store.upsert_local(_issue(1, "new"))

        assert len(store) == 1
        assert store.require(1).title == "new"

    def test_snapshot_taken_before_write_is_unchanged(self, store: SnapshotStore) -> None:
        """Readers holding an earlier view never see a partial write."""
        store.upsert_local(_issue(1))
        before = store.all()

        store.replace_all([_issue(2)])

        assert [i.id for i in before] == [1]


@pytest.mark.unit
class TestPersistence:
    """Tests for persist / load."""

    def test_persist_then_load(self, store: SnapshotStore) -> None:
        store.upsert_local(_issue(1, "Bug"))
        assert store.persist() is True

        store.replace_all([])
        loaded = store.load()

        assert [i.title for i in loaded] == ["Bug"]

    def test_load_missing_row_initializes_empty(self) -> None:
        """A fresh database loads as an empty mirror and writes it back."""
        s = SnapshotStore(":memory:")
        try:
            assert s.load() == []
            assert s._read() == encode_snapshot([])
        finally:
            s.close()

    def test_load_corrupt_payload_resets(self, store: SnapshotStore) -> None:
        store.upsert_local(_issue(1))
        _write_raw(store, "{not json")

        assert store.load() == []
        assert decode_snapshot(store._read()) == []

    def test_load_empty_payload_resets(self, store: SnapshotStore) -> None:
        _write_raw(store, "   ")

        assert store.load() == []

    def test_load_invalid_issue_resets(self, store: SnapshotStore) -> None:
        """An issue record missing required fields counts as corrupt."""
        _write_raw(store, '{"issues": [{"id": 1}]}')

        assert store.load() == []

    def test_persist_failure_is_not_raised(self, store: SnapshotStore) -> None:
        """A failed write is logged and reported, the mirror stays as it is."""
        store.upsert_local(_issue(1))
        with patch.object(store, "_write", side_effect=PersistenceError("disk full")):
            assert store.persist() is False

        assert [i.id for i in store.all()] == [1]


@pytest.mark.unit
class TestSnapshotDocument:
    """Tests for encode_snapshot / decode_snapshot."""

    def test_document_has_issues_key(self) -> None:
        document = json.loads(encode_snapshot([_issue(1)]))

        assert list(document) == ["issues"]
        assert document["issues"][0]["id"] == 1

    def test_decode_rejects_duplicate_ids(self) -> None:
        payload = encode_snapshot([_issue(1), _issue(1)])

        with pytest.raises(InvalidSnapshotError, match="duplicate"):
            decode_snapshot(payload)
