"""Outbound event types sent to subscribers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from issuehub.snapshot_store import Comment, Issue


class EventType(str, Enum):
    """Types of events that can be sent to subscribers."""

    INITIAL_DATA = "INITIAL_DATA"
    ISSUE_CREATED = "ISSUE_CREATED"
    SYNC_UPDATE = "SYNC_UPDATE"
    COMMENTS_FETCHED = "COMMENTS_FETCHED"


@dataclass
class Event:
    """A message for one or more subscribers.

    ``payload`` holds the message fields other than ``type``.
    """

    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> dict[str, Any]:
        return {"type": self.event_type.value, **self.payload}

    # Constructors for each event kind

    @classmethod
    def initial_data(cls, issues: Iterable[Issue], remote_configured: bool) -> Event:
        return cls(
            EventType.INITIAL_DATA,
            {
                "data": [issue.to_dict() for issue in issues],
                "githubConfigured": remote_configured,
            },
        )

    @classmethod
    def issue_created(cls, issue: Issue) -> Event:
        return cls(EventType.ISSUE_CREATED, {"data": issue.to_dict()})

    @classmethod
    def sync_update(cls, issues: Iterable[Issue]) -> Event:
        return cls(EventType.SYNC_UPDATE, {"data": [issue.to_dict() for issue in issues]})

    @classmethod
    def comments_fetched(cls, issue_id: int, comments: Iterable[Comment]) -> Event:
        return cls(
            EventType.COMMENTS_FETCHED,
            {"issueId": issue_id, "comments": [comment.to_dict() for comment in comments]},
        )
