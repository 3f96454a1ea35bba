"""Data models for the remote issue tracker client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass
class RemoteIssue:
    """An issue as the remote tracker reports it."""

    number: int
    node_id: str
    title: str
    body: str
    state: str  # "open" or "closed"
    author: str
    html_url: str
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.state == "open"
