"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from issuehub.api.dependencies import close_runtime, init_runtime
from issuehub.api.models import APIResponse
from issuehub.api.routes import issues, sync, ws
from issuehub.api.runtime import Runtime
from issuehub.config import Settings
from issuehub.snapshot_store import IssueNotFoundError, SnapshotStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from issuehub.remote import RemoteAuthority


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings: Settings = app.state.settings
    remote: RemoteAuthority | None = getattr(app.state, "remote", None)
    runtime = init_runtime(Runtime.build(settings, remote=remote))
    await runtime.start()

    yield
    # Shutdown
    await runtime.stop()
    close_runtime()


def create_app(
    settings: Settings | None = None,
    remote: RemoteAuthority | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Server configuration; read from the environment when omitted.
        remote: Remote tracker override (tests); GitHub per settings otherwise.
    """
    app = FastAPI(
        title="IssueHub API",
        description="Real-time issue tracker mirrored from GitHub Issues",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings if settings is not None else Settings.from_env()
    app.state.remote = remote

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(IssueNotFoundError)
    async def issue_not_found_handler(
        _request: Request, _exc: IssueNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error="Issue not found").model_dump(),
        )

    @app.exception_handler(SnapshotStoreError)
    async def snapshot_store_error_handler(
        _request: Request, _exc: SnapshotStoreError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    app.include_router(issues.router, prefix="/api")
    app.include_router(sync.router, prefix="/api")
    app.include_router(ws.router)

    return app
