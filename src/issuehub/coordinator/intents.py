"""Pydantic models for inbound subscriber messages."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from issuehub.coordinator.exceptions import MalformedIntentError
from issuehub.snapshot_store import IssueStatus


class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class IssueDraft(_Message):
    """Fields of a new issue."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    created_by: str = Field(..., alias="createdBy", min_length=1, max_length=255)


class CommentDraft(_Message):
    """Fields of a new comment."""

    user: str = Field(..., min_length=1, max_length=255)
    text: str = Field(..., min_length=1)


class CreateIssueIntent(_Message):
    type: Literal["CREATE_ISSUE"]
    data: IssueDraft


class UpdateStatusIntent(_Message):
    type: Literal["UPDATE_STATUS"]
    issue_id: int = Field(..., alias="issueId")
    status: IssueStatus
    user: str = Field(..., min_length=1, max_length=255)


class AddCommentIntent(_Message):
    type: Literal["ADD_COMMENT"]
    issue_id: int = Field(..., alias="issueId")
    comment: CommentDraft


class FetchCommentsIntent(_Message):
    type: Literal["FETCH_COMMENTS"]
    issue_id: int = Field(..., alias="issueId")


Intent = Annotated[
    CreateIssueIntent | UpdateStatusIntent | AddCommentIntent | FetchCommentsIntent,
    Field(discriminator="type"),
]

_intent_adapter: TypeAdapter[Intent] = TypeAdapter(Intent)


def parse_intent(message: Any) -> Intent:
    """Validate a decoded inbound message.

    Raises:
        MalformedIntentError: Unknown ``type`` or missing/invalid fields.
    """
    try:
        return _intent_adapter.validate_python(message)
    except ValidationError as e:
        raise MalformedIntentError(f"Malformed intent: {e.error_count()} error(s): {e}") from e
