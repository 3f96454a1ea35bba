"""Issue endpoints for non-WebSocket clients."""

from fastapi import APIRouter, status

from issuehub.api.dependencies import CoordinatorDep, StoreDep
from issuehub.api.models import (
    APIResponse,
    IssueCreate,
    IssueResponse,
    MutationResponse,
    issue_to_response,
    mutation_to_response,
)

router = APIRouter(prefix="/issues", tags=["issues"])


@router.get("", response_model=APIResponse[list[IssueResponse]])
def list_issues(store: StoreDep) -> APIResponse[list[IssueResponse]]:
    """List the current mirror, ordered by id."""
    return APIResponse(data=[issue_to_response(issue) for issue in store.all()])


@router.get("/{issue_id}", response_model=APIResponse[IssueResponse])
def get_issue(issue_id: int, store: StoreDep) -> APIResponse[IssueResponse]:
    """Get one issue from the mirror."""
    return APIResponse(data=issue_to_response(store.require(issue_id)))


@router.post(
    "",
    response_model=APIResponse[MutationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_issue(
    issue: IssueCreate, coordinator: CoordinatorDep
) -> APIResponse[MutationResponse]:
    """Create an issue through the same path as WebSocket clients."""
    result = await coordinator.create_issue(issue.title, issue.description, issue.created_by)
    return APIResponse(data=mutation_to_response(result))
