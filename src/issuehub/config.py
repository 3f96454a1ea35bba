"""Runtime settings read from the environment."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass

DEFAULT_DB_PATH = "issuehub.db"
DEFAULT_SYNC_INTERVAL = 30.0  # seconds
DEFAULT_RESYNC_DELAY = 2.0  # seconds
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000

_FALSE_VALUES = {"0", "false", "no", "off"}


def get_github_token() -> str:
    """Get GitHub token from environment or gh CLI."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return ""


@dataclass
class Settings:
    """Server configuration.

    Attributes:
        db_path: SQLite file holding the persisted snapshot.
        audit_repo: Directory of the git repository used as audit trail.
        audit_enabled: Whether accepted mutations are committed to git.
        github_repo: Remote issue tracker target in "owner/repo" format.
        github_token: Token for the remote tracker.
        sync_interval: Seconds between periodic reconciliations.
        resync_delay: Seconds between a remote mutation and its follow-up pull.
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
    """

    db_path: str = DEFAULT_DB_PATH
    audit_repo: str = "."
    audit_enabled: bool = True
    github_repo: str = ""
    github_token: str = ""
    sync_interval: float = DEFAULT_SYNC_INTERVAL
    resync_delay: float = DEFAULT_RESYNC_DELAY
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @property
    def remote_configured(self) -> bool:
        """True when both a target repo and a token are present."""
        return bool(self.github_repo and self.github_token)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ISSUEHUB_* and GITHUB_* variables."""
        env = os.environ
        github_repo = env.get("GITHUB_REPO", "").strip()
        # Only shell out to gh when a target repo is actually set
        token = get_github_token() if github_repo else env.get("GITHUB_TOKEN", "")
        return cls(
            db_path=env.get("ISSUEHUB_DB_PATH", DEFAULT_DB_PATH),
            audit_repo=env.get("ISSUEHUB_AUDIT_REPO", "."),
            audit_enabled=env.get("ISSUEHUB_AUDIT_ENABLED", "1").lower() not in _FALSE_VALUES,
            github_repo=github_repo,
            github_token=token,
            sync_interval=float(env.get("ISSUEHUB_SYNC_INTERVAL", DEFAULT_SYNC_INTERVAL)),
            resync_delay=float(env.get("ISSUEHUB_RESYNC_DELAY", DEFAULT_RESYNC_DELAY)),
            host=env.get("ISSUEHUB_HOST", DEFAULT_HOST),
            port=int(env.get("ISSUEHUB_PORT", DEFAULT_PORT)),
        )
