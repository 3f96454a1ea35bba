"""Reconciler - Pulls the remote tracker and swaps the mirror wholesale."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from issuehub.broadcast import Event
from issuehub.reconciler.models import ResyncResult, ResyncStatus
from issuehub.remote import RemoteError
from issuehub.snapshot_store import Issue, IssueStatus

if TYPE_CHECKING:
    from issuehub.audit_log import AuditLog
    from issuehub.broadcast import BroadcastHub
    from issuehub.remote import RemoteAuthority, RemoteIssue
    from issuehub.scheduler import BackgroundTasks
    from issuehub.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


def remote_to_issue(remote: RemoteIssue) -> Issue:
    """Map a remote issue onto the mirror's shape.

    Comments are left empty; they are fetched on demand per issue.
    """
    return Issue(
        id=remote.number,
        title=remote.title,
        description=remote.body,
        status=IssueStatus.OPEN if remote.is_open else IssueStatus.CLOSED,
        created_by=remote.author,
        created_at=remote.created_at,
        updated_at=remote.updated_at,
        comments=[],
        remote_id=remote.node_id,
        remote_url=remote.html_url,
    )


class Reconciler:
    """Keeps the mirror in line with the remote tracker.

    Runs on a fixed interval and on demand. A failed pull leaves the current
    mirror in place: stale data beats no data. Concurrent pulls are not
    serialized; whichever finishes last defines the mirror.
    """

    def __init__(
        self,
        store: SnapshotStore,
        remote: RemoteAuthority,
        audit: AuditLog,
        hub: BroadcastHub,
        tasks: BackgroundTasks,
    ) -> None:
        """Initialize the Reconciler.

        Args:
            store: Snapshot store to replace.
            remote: Remote tracker to pull from.
            audit: Audit log receiving one entry per completed pull.
            hub: Broadcast hub for the SYNC_UPDATE event.
            tasks: Background task set for audit and fan-out.
        """
        self.store = store
        self.remote = remote
        self.audit = audit
        self.hub = hub
        self.tasks = tasks

    async def resync(self) -> ResyncResult:
        """Pull every remote issue and make it the mirror."""
        if not self.remote.is_configured():
            logger.debug("Remote not configured, skipping resync")
            return ResyncResult(status=ResyncStatus.SKIPPED)

        try:
            remote_issues = await self.remote.list_all()
        except RemoteError as e:
            logger.warning("Resync failed, keeping current mirror: %s", e)
            return ResyncResult(status=ResyncStatus.FAILED, error=str(e))

        issues = []
        for remote in remote_issues:
            try:
                issues.append(remote_to_issue(remote))
            except ValueError as e:
                logger.warning("Skipping remote issue #%d: %s", remote.number, e)

        self.store.replace_all(issues)
        self.store.persist()
        count = len(issues)
        logger.info("Synced %d issue(s) from remote", count)

        self.tasks.spawn(self.audit.record(f"Synced {count} issues"), name="audit-resync")
        self.tasks.spawn(
            self.hub.broadcast(Event.sync_update(self.store.all())), name="broadcast-resync"
        )
        return ResyncResult(status=ResyncStatus.SYNCED, issue_count=count)
