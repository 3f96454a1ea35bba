"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from issuehub.api.runtime import Runtime
from issuehub.audit_log import AuditLog
from issuehub.broadcast import BroadcastHub
from issuehub.coordinator import MutationCoordinator
from issuehub.reconciler import Reconciler
from issuehub.snapshot_store import SnapshotStore

# Global Runtime instance (initialized on app startup)
_runtime: Runtime | None = None


def init_runtime(runtime: Runtime) -> Runtime:
    """Install the global Runtime instance."""
    global _runtime  # noqa: PLW0603
    _runtime = runtime
    return _runtime


def close_runtime() -> None:
    """Forget the global Runtime instance."""
    global _runtime  # noqa: PLW0603
    _runtime = None


def get_runtime() -> Generator[Runtime, None, None]:
    """Dependency that provides the Runtime instance."""
    if _runtime is None:
        raise RuntimeError("Runtime not initialized. Call init_runtime() first.")
    yield _runtime


RuntimeDep = Annotated[Runtime, Depends(get_runtime)]


def get_store(runtime: RuntimeDep) -> SnapshotStore:
    return runtime.store


def get_hub(runtime: RuntimeDep) -> BroadcastHub:
    return runtime.hub


def get_coordinator(runtime: RuntimeDep) -> MutationCoordinator:
    return runtime.coordinator


def get_reconciler(runtime: RuntimeDep) -> Reconciler:
    return runtime.reconciler


def get_audit_log(runtime: RuntimeDep) -> AuditLog:
    return runtime.audit


# Type aliases for dependency injection
StoreDep = Annotated[SnapshotStore, Depends(get_store)]
HubDep = Annotated[BroadcastHub, Depends(get_hub)]
CoordinatorDep = Annotated[MutationCoordinator, Depends(get_coordinator)]
ReconcilerDep = Annotated[Reconciler, Depends(get_reconciler)]
AuditLogDep = Annotated[AuditLog, Depends(get_audit_log)]
