"""AuditLog - Commits a copy of the snapshot to git for every accepted change."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from issuehub.audit_log.exceptions import (
    CommitError,
    NothingToCommitError,
    RepositoryError,
)
from issuehub.audit_log.models import AuditEntry, AuditOutcome
from issuehub.logging import truncate_output
from issuehub.snapshot_store import encode_snapshot

if TYPE_CHECKING:
    from collections.abc import Coroutine
    from typing import Any

    from issuehub.snapshot_store import SnapshotStore

logger = logging.getLogger("issuehub.audit_log")

COMMITTER_NAME = "Issue Tracker"
COMMITTER_EMAIL = "tracker@example.com"


class AuditLog:
    """Human-auditable change log kept as git history.

    Every entry writes the current snapshot to ``snapshot_file`` inside
    ``repo_path`` and commits it with the entry summary as the message.
    Recording never raises: failures are logged and reported through
    ``AuditOutcome``.
    """

    def __init__(
        self,
        store: SnapshotStore,
        repo_path: str | Path = ".",
        snapshot_file: str = "issues.json",
        enabled: bool = True,
    ) -> None:
        """Initialize Audit Log.

        Args:
            store: Snapshot store whose content each entry captures
            repo_path: Directory of the git repository (created on init_repo)
            snapshot_file: File name of the snapshot copy inside the repo
            enabled: When False, record() is a logged no-op
        """
        self.store = store
        self.repo_path = Path(repo_path)
        self.snapshot_file = snapshot_file
        self.enabled = enabled
        # git holds an index lock; commits from worker threads go one at a time
        self._lock = threading.Lock()
        # FIFO, so entries land in the order they were recorded
        self._order = asyncio.Lock()

    def _run_git(self, *args: str) -> str:
        """Run a git command in the audit repository.

        Raises:
            subprocess.CalledProcessError: If command fails
        """
        result = subprocess.run(
            ["git", *args],
            cwd=self.repo_path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def init_repo(self) -> None:
        """Create the repository and committer identity if missing.

        Raises:
            RepositoryError: If git is unavailable or init fails
        """
        if not self.enabled:
            return
        self.repo_path.mkdir(parents=True, exist_ok=True)
        try:
            self._run_git("rev-parse", "--git-dir")
            logger.info("Audit repository already initialized at %s", self.repo_path)
            return
        except subprocess.CalledProcessError:
            pass
        except FileNotFoundError as e:
            raise RepositoryError("git executable not found") from e

        logger.info("Initializing audit repository at %s", self.repo_path)
        try:
            self._run_git("init")
            self._run_git("config", "user.name", COMMITTER_NAME)
            self._run_git("config", "user.email", COMMITTER_EMAIL)
        except subprocess.CalledProcessError as e:
            raise RepositoryError(f"Failed to initialize audit repository: {e.stderr}") from e

    def record(self, summary: str) -> Coroutine[Any, Any, AuditOutcome]:
        """Record an entry for the snapshot as it is right now.

        The snapshot is captured immediately; the returned coroutine does the
        git work in a worker thread, so callers can hand it to a background
        task without waiting on it. Entries whose coroutines are started in
        order are committed in that order.
        """
        payload = encode_snapshot(self.store.all())
        return self._commit_in_order(summary, payload)

    async def _commit_in_order(self, summary: str, payload: str) -> AuditOutcome:
        async with self._order:
            return await asyncio.to_thread(self.commit, summary, payload)

    def commit(self, summary: str, payload: str) -> AuditOutcome:
        """Write ``payload`` and commit it with ``summary``. Blocking."""
        if not self.enabled:
            logger.debug("Audit disabled, skipping: %s", summary)
            return AuditOutcome.DISABLED
        try:
            with self._lock:
                self._commit(summary, payload)
        except NothingToCommitError:
            logger.info("Audit unchanged, no entry needed: %s", summary)
            return AuditOutcome.UNCHANGED
        except (CommitError, OSError) as e:
            logger.error("Audit commit failed for %r: %s", summary, e)
            return AuditOutcome.FAILED
        logger.info("Audit commit: %s", summary)
        return AuditOutcome.COMMITTED

    def _commit(self, summary: str, payload: str) -> None:
        (self.repo_path / self.snapshot_file).write_text(payload + "\n", encoding="utf-8")
        try:
            self._run_git("add", self.snapshot_file)
            status = self._run_git("status", "--porcelain", "--", self.snapshot_file)
            if not status:
                raise NothingToCommitError(summary)
            self._run_git("commit", "-m", summary, "--", self.snapshot_file)
        except subprocess.CalledProcessError as e:
            raise CommitError(truncate_output(e.stderr or e.stdout or str(e))) from e
        except FileNotFoundError as e:
            raise CommitError("git executable not found") from e

    def history(self, limit: int = 30) -> list[AuditEntry]:
        """Most recent audit entries, newest first. Empty before the first commit."""
        if not self.enabled:
            return []
        try:
            output = self._run_git("log", "--pretty=format:%h %s", f"-{limit}")
        except (subprocess.CalledProcessError, FileNotFoundError):
            return []

        entries = []
        for line in output.splitlines():
            if not line:
                continue
            sha, _, subject = line.partition(" ")
            entries.append(AuditEntry(sha=sha, summary=subject))
        return entries
