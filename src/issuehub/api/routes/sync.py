"""Sync and status endpoints."""

from fastapi import APIRouter

from issuehub.api.dependencies import AuditLogDep, HubDep, ReconcilerDep, RuntimeDep
from issuehub.api.models import (
    APIResponse,
    AuditLogResponse,
    ConfigResponse,
    ResyncResponse,
    resync_to_response,
)

router = APIRouter(tags=["sync"])


@router.post("/sync", response_model=APIResponse[ResyncResponse])
async def trigger_sync(reconciler: ReconcilerDep) -> APIResponse[ResyncResponse]:
    """Pull the remote tracker now instead of waiting for the next interval."""
    result = await reconciler.resync()
    return APIResponse(data=resync_to_response(result))


@router.get("/config", response_model=APIResponse[ConfigResponse])
def get_config(runtime: RuntimeDep, hub: HubDep) -> APIResponse[ConfigResponse]:
    """Report whether the remote tracker is configured and how often it is polled."""
    settings = runtime.settings
    return APIResponse(
        data=ConfigResponse(
            github_configured=runtime.remote_configured,
            repo=settings.github_repo or None,
            sync_interval_seconds=settings.sync_interval,
            subscribers=hub.subscriber_count,
        )
    )


@router.get("/audit-log", response_model=APIResponse[AuditLogResponse])
def get_audit_log(audit: AuditLogDep, limit: int = 30) -> APIResponse[AuditLogResponse]:
    """Latest audit entries, newest first."""
    entries = audit.history(limit=max(1, min(limit, 500)))
    return APIResponse(data=AuditLogResponse(log=[str(entry) for entry in entries]))
