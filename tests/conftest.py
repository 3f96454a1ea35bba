"""Shared pytest fixtures and configuration."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import create_autospec

import pytest

from issuehub.audit_log import AuditLog, AuditOutcome
from issuehub.broadcast import BroadcastHub
from issuehub.remote import GitHubIssues, RemoteIssue
from issuehub.scheduler import BackgroundTasks
from issuehub.snapshot_store import SnapshotStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: tests against a live GitHub repository")


class FakeChannel:
    """In-memory Channel that records what it was sent."""

    def __init__(self, is_open: bool = True, fail: bool = False) -> None:
        self.open = is_open
        self.fail = fail
        self.messages: list[dict[str, Any]] = []

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_json(self, message: dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.messages.append(message)

    def types(self) -> list[str]:
        return [m["type"] for m in self.messages]


class RecordingAuditLog(AuditLog):
    """Audit log that remembers summaries instead of touching git."""

    def __init__(self, store: SnapshotStore) -> None:
        super().__init__(store, enabled=False)
        self.summaries: list[str] = []

    def commit(self, summary: str, payload: str) -> AuditOutcome:
        self.summaries.append(summary)
        return super().commit(summary, payload)


def make_remote_issue(number: int, title: str = "", state: str = "open", **kwargs: Any):
    """Build a RemoteIssue with sensible defaults."""
    created = kwargs.pop("created_at", datetime(2024, 5, 1, 12, 0, tzinfo=UTC))
    return RemoteIssue(
        number=number,
        node_id=kwargs.pop("node_id", f"I_node{number}"),
        title=title or f"Remote issue {number}",
        body=kwargs.pop("body", ""),
        state=state,
        author=kwargs.pop("author", "octocat"),
        html_url=f"https://github.com/owner/repo/issues/{number}",
        created_at=created,
        updated_at=kwargs.pop("updated_at", created),
    )


# Shared fixtures


@pytest.fixture
def store():
    """Create an in-memory SnapshotStore with an empty mirror."""
    s = SnapshotStore(":memory:")
    s.load()
    yield s
    s.close()


@pytest.fixture
def audit(store: SnapshotStore) -> RecordingAuditLog:
    return RecordingAuditLog(store)


@pytest.fixture
def hub(store: SnapshotStore) -> BroadcastHub:
    return BroadcastHub(store)


@pytest.fixture
def tasks() -> BackgroundTasks:
    return BackgroundTasks()


@pytest.fixture
def remote():
    """Autospec'd GitHubIssues: async methods are AsyncMocks."""
    mock = create_autospec(GitHubIssues, instance=True)
    mock.is_configured.return_value = True
    mock.list_all.return_value = []
    return mock


@pytest.fixture
def unconfigured_remote():
    mock = create_autospec(GitHubIssues, instance=True)
    mock.is_configured.return_value = False
    return mock


@pytest.fixture
def channel_factory():
    """Factory for FakeChannel instances."""
    return FakeChannel


@pytest.fixture
def remote_issue_factory():
    return make_remote_issue
