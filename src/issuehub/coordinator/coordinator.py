"""MutationCoordinator - Remote-first, local-fallback handling of client mutations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from issuehub.broadcast import Event
from issuehub.coordinator.intents import (
    AddCommentIntent,
    CreateIssueIntent,
    FetchCommentsIntent,
    UpdateStatusIntent,
    parse_intent,
)
from issuehub.coordinator.models import MutationOutcome, MutationResult
from issuehub.remote import RemoteError
from issuehub.snapshot_store import Issue, IssueStatus

if TYPE_CHECKING:
    from issuehub.audit_log import AuditLog
    from issuehub.broadcast import BroadcastHub, Subscriber
    from issuehub.remote import RemoteAuthority
    from issuehub.scheduler import BackgroundTasks, DelayedCall
    from issuehub.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class MutationCoordinator:
    """Decides, per client mutation, whether it goes to the remote or stays local.

    Each intent moves once from "attempting remote" to a terminal outcome:
    - remote succeeded: the mirror is not touched; a delayed resync brings the
      change back the same way every other client sees it.
    - remote failed or unconfigured: creates are applied to the mirror
      directly; status changes and comments have no local path.

    Audit entries and broadcasts run in the background; callers only wait for
    the remote call or the local write.

    Known gap: a local-fallback issue created while the remote is flapping is
    dropped by the next successful resync, which replaces the whole mirror.
    """

    def __init__(
        self,
        store: SnapshotStore,
        remote: RemoteAuthority,
        audit: AuditLog,
        hub: BroadcastHub,
        resync: DelayedCall,
        tasks: BackgroundTasks,
    ) -> None:
        """Initialize the coordinator.

        Args:
            store: Snapshot store for local-fallback writes.
            remote: Remote tracker tried first.
            audit: Audit log for accepted mutations.
            hub: Broadcast hub for deltas and point-to-point replies.
            resync: Coalescing delayed call that triggers a reconciler pull.
            tasks: Background task set for audit and fan-out.
        """
        self.store = store
        self.remote = remote
        self.audit = audit
        self.hub = hub
        self.resync = resync
        self.tasks = tasks

    def _record(self, summary: str) -> None:
        self.tasks.spawn(self.audit.record(summary), name="audit")

    def _schedule_resync(self) -> None:
        if not self.resync.schedule():
            logger.debug("Resync already pending")

    async def dispatch(
        self, message: Any, subscriber: Subscriber | None = None
    ) -> MutationResult:
        """Validate an inbound message and run the matching operation.

        Raises:
            MalformedIntentError: If the message is not a valid intent.
        """
        intent = parse_intent(message)
        match intent:
            case CreateIssueIntent(data=draft):
                return await self.create_issue(draft.title, draft.description, draft.created_by)
            case UpdateStatusIntent():
                return await self.update_status(intent.issue_id, intent.status, intent.user)
            case AddCommentIntent(comment=comment):
                return await self.add_comment(intent.issue_id, comment.user, comment.text)
            case FetchCommentsIntent():
                return await self.fetch_comments(intent.issue_id, subscriber)
        raise AssertionError(f"Unhandled intent {intent!r}")  # pragma: no cover

    async def create_issue(self, title: str, description: str, created_by: str) -> MutationResult:
        """Create an issue remotely, or locally when the remote can't take it."""
        error: str | None = None
        if self.remote.is_configured():
            try:
                remote_issue = await self.remote.create(title, description, created_by)
            except RemoteError as e:
                error = str(e)
                logger.warning("Remote create failed, applying locally: %s", e)
            else:
                logger.info("Issue #%d created remotely", remote_issue.number)
                self._record(
                    f'Issue #{remote_issue.number} created: "{title}" by {created_by}'
                )
                self._schedule_resync()
                return MutationResult(outcome=MutationOutcome.REMOTE_SUCCEEDED)

        issue = Issue(
            id=self.store.next_local_id(),
            title=title,
            description=description,
            status=IssueStatus.OPEN,
            created_by=created_by,
        )
        self.store.upsert_local(issue)
        self.store.persist()
        logger.info("Issue #%d created locally", issue.id)

        self._record(f'Issue #{issue.id} created: "{issue.title}" by {issue.created_by}')
        self.tasks.spawn(self.hub.broadcast(Event.issue_created(issue)), name="broadcast-create")
        return MutationResult(outcome=MutationOutcome.APPLIED_LOCALLY, issue=issue, error=error)

    async def update_status(self, issue_id: int, status: IssueStatus, user: str) -> MutationResult:
        """Change an issue's status on the remote; the next resync shows it."""
        summary = f'Issue #{issue_id} status changed to "{status.value}" by {user}'
        if not self.remote.is_configured():
            logger.info("Remote not configured, status change for #%d not applied", issue_id)
            self._record(summary)
            return MutationResult(outcome=MutationOutcome.SKIPPED)

        try:
            await self.remote.set_status(issue_id, status)
        except RemoteError as e:
            logger.warning("Remote status change for #%d failed: %s", issue_id, e)
            result = MutationResult(outcome=MutationOutcome.FAILED, error=str(e))
        else:
            self._record(summary)
            result = MutationResult(outcome=MutationOutcome.REMOTE_SUCCEEDED)
        self._schedule_resync()
        return result

    async def add_comment(self, issue_id: int, author: str, text: str) -> MutationResult:
        """Post a comment on the remote; the next resync shows it."""
        summary = f"Comment added to Issue #{issue_id} by {author}"
        if not self.remote.is_configured():
            logger.info("Remote not configured, comment on #%d not applied", issue_id)
            self._record(summary)
            return MutationResult(outcome=MutationOutcome.SKIPPED)

        try:
            await self.remote.add_comment(issue_id, author, text)
        except RemoteError as e:
            logger.warning("Remote comment on #%d failed: %s", issue_id, e)
            result = MutationResult(outcome=MutationOutcome.FAILED, error=str(e))
        else:
            self._record(summary)
            result = MutationResult(outcome=MutationOutcome.REMOTE_SUCCEEDED)
        self._schedule_resync()
        return result

    async def fetch_comments(
        self, issue_id: int, subscriber: Subscriber | None = None
    ) -> MutationResult:
        """Read an issue's comments and reply to the requester only.

        The comments are not written into the mirror. Without a remote, the
        mirror's own comment list is returned.
        """
        if self.remote.is_configured():
            try:
                comments = await self.remote.list_comments(issue_id)
            except RemoteError as e:
                logger.warning("Fetching comments for #%d failed: %s", issue_id, e)
                return MutationResult(outcome=MutationOutcome.FAILED, error=str(e))
            outcome = MutationOutcome.REMOTE_SUCCEEDED
        else:
            issue = self.store.get(issue_id)
            comments = list(issue.comments) if issue is not None else []
            outcome = MutationOutcome.SKIPPED

        if subscriber is not None:
            await self.hub.send_to(subscriber, Event.comments_fetched(issue_id, comments))
        return MutationResult(outcome=outcome, comments=comments)
