"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class _CamelModel(BaseModel):
    """Serializes with the camelCase keys the browser client uses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Issue models


class CommentResponse(_CamelModel):
    """Response model for a comment."""

    user: str
    text: str
    timestamp: datetime


class IssueResponse(_CamelModel):
    """Response model for an issue."""

    id: int
    title: str
    description: str
    status: str
    created_by: str
    created_at: datetime
    updated_at: datetime | None = None
    comments: list[CommentResponse] = Field(default_factory=list)
    remote_id: str | None = None
    remote_url: str | None = None


def issue_to_response(issue: Any) -> IssueResponse:
    """Convert an Issue to IssueResponse."""
    return IssueResponse.model_validate(issue.to_dict())


class IssueCreate(_CamelModel):
    """Request model for creating an issue."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    created_by: str = Field(..., min_length=1, max_length=255)


class MutationResponse(_CamelModel):
    """Response model for a mutation request."""

    outcome: str
    issue: IssueResponse | None = None
    error: str | None = None


def mutation_to_response(result: Any) -> MutationResponse:
    """Convert a MutationResult to MutationResponse."""
    return MutationResponse(
        outcome=result.outcome.value,
        issue=issue_to_response(result.issue) if result.issue is not None else None,
        error=result.error,
    )


# Sync / status models


class ResyncResponse(_CamelModel):
    """Response model for an on-demand resync."""

    status: str
    issue_count: int
    error: str | None = None


def resync_to_response(result: Any) -> ResyncResponse:
    """Convert a ResyncResult to ResyncResponse."""
    return ResyncResponse(
        status=result.status.value,
        issue_count=result.issue_count,
        error=result.error,
    )


class ConfigResponse(_CamelModel):
    """Response model for configuration status."""

    github_configured: bool
    repo: str | None = None
    sync_interval_seconds: float
    subscribers: int


class AuditLogResponse(BaseModel):
    """Response model for the audit trail (newest first)."""

    log: list[str]
