"""Runtime - Builds and owns every long-lived component of the server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from issuehub.audit_log import AuditLog, RepositoryError
from issuehub.broadcast import BroadcastHub
from issuehub.coordinator import MutationCoordinator
from issuehub.reconciler import Reconciler
from issuehub.remote import GitHubIssues
from issuehub.scheduler import BackgroundTasks, DelayedCall, PeriodicTask
from issuehub.snapshot_store import SnapshotStore

if TYPE_CHECKING:
    from issuehub.config import Settings
    from issuehub.remote import RemoteAuthority

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """The wired-up server: store, audit log, remote, hub, reconciler, coordinator."""

    settings: Settings
    store: SnapshotStore
    audit: AuditLog
    remote: RemoteAuthority
    hub: BroadcastHub
    tasks: BackgroundTasks
    reconciler: Reconciler
    resync_call: DelayedCall
    coordinator: MutationCoordinator
    poller: PeriodicTask | None = None

    @classmethod
    def build(cls, settings: Settings, remote: RemoteAuthority | None = None) -> Runtime:
        """Wire components from settings.

        Args:
            settings: Server configuration.
            remote: Remote tracker override; defaults to GitHub per settings.
        """
        if remote is None:
            remote = GitHubIssues(repo=settings.github_repo, token=settings.github_token)
        store = SnapshotStore(settings.db_path)
        audit = AuditLog(store, settings.audit_repo, enabled=settings.audit_enabled)
        hub = BroadcastHub(store, remote_configured=remote.is_configured())
        tasks = BackgroundTasks()
        reconciler = Reconciler(store, remote, audit, hub, tasks)
        resync_call = DelayedCall(
            settings.resync_delay, reconciler.resync, name="resync-after-mutation"
        )
        coordinator = MutationCoordinator(store, remote, audit, hub, resync_call, tasks)
        poller = None
        if remote.is_configured():
            poller = PeriodicTask(
                settings.sync_interval,
                reconciler.resync,
                run_immediately=True,
                name="periodic-resync",
            )
        return cls(
            settings=settings,
            store=store,
            audit=audit,
            remote=remote,
            hub=hub,
            tasks=tasks,
            reconciler=reconciler,
            resync_call=resync_call,
            coordinator=coordinator,
            poller=poller,
        )

    @property
    def remote_configured(self) -> bool:
        return self.remote.is_configured()

    async def start(self) -> None:
        """Load the snapshot, prepare the audit repo and start polling."""
        self.store.load()
        try:
            self.audit.init_repo()
        except RepositoryError as e:
            logger.error("Audit log unavailable, continuing without it: %s", e)
            self.audit.enabled = False

        if self.poller is not None:
            self.poller.start()
            logger.info(
                "GitHub sync enabled for %s (every %.0fs)",
                self.settings.github_repo,
                self.settings.sync_interval,
            )
        else:
            logger.info("GitHub not configured, running local-only")

    async def stop(self) -> None:
        """Stop timers, let pending audit/fan-out finish, release resources."""
        if self.poller is not None:
            await self.poller.stop()
        await self.resync_call.cancel()
        await self.tasks.drain()
        await self.remote.aclose()
        self.store.close()
