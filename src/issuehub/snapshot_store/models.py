"""Issue data types and the SQLAlchemy row holding the persisted snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import DateTime, Integer, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# The single snapshot row always lives under this key
SNAPSHOT_ROW_ID = 1


class IssueStatus(StrEnum):
    """Issue status enum."""

    OPEN = "Open"
    CLOSED = "Closed"


def utcnow() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(UTC)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp the way the browser client expects (ISO-8601, 'Z')."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class Comment:
    """A comment on an issue. Append-only."""

    author: str
    text: str
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.author,
            "text": self.text,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Comment:
        return cls(
            author=str(data["user"]),
            text=str(data["text"]),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass
class Issue:
    """An issue in the mirror.

    ``remote_id`` and ``remote_url`` are only set on issues pulled from the
    remote tracker.
    """

    id: int
    title: str
    created_by: str
    description: str = ""
    status: IssueStatus = IssueStatus.OPEN
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime | None = None
    comments: list[Comment] = field(default_factory=list)
    remote_id: str | None = None
    remote_url: str | None = None

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError(f"Issue #{self.id} has an empty title")
        if self.updated_at is not None and self.updated_at < self.created_at:
            raise ValueError(f"Issue #{self.id} updated before it was created")

    @property
    def is_remote(self) -> bool:
        return self.remote_id is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdBy": self.created_by,
            "createdAt": format_timestamp(self.created_at),
            "comments": [comment.to_dict() for comment in self.comments],
        }
        if self.updated_at is not None:
            data["updatedAt"] = format_timestamp(self.updated_at)
        if self.remote_id is not None:
            data["remoteId"] = self.remote_id
            data["remoteUrl"] = self.remote_url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Issue:
        updated_at = data.get("updatedAt")
        remote_id = data.get("remoteId")
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            status=IssueStatus(data.get("status", IssueStatus.OPEN.value)),
            created_by=str(data["createdBy"]),
            created_at=parse_timestamp(data["createdAt"]),
            updated_at=parse_timestamp(updated_at) if updated_at else None,
            comments=[Comment.from_dict(c) for c in data.get("comments", [])],
            remote_id=str(remote_id) if remote_id is not None else None,
            remote_url=data.get("remoteUrl"),
        )


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class SnapshotRecord(Base):
    """Durable copy of the mirror: one JSON document ``{"issues": [...]}``."""

    __tablename__ = "snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<SnapshotRecord(id={self.id!r}, bytes={len(self.payload)})>"
