"""Remote - Client for the remote issue tracker (GitHub Issues)."""

from issuehub.remote.client import GitHubIssues, RemoteAuthority, compose_body, split_body
from issuehub.remote.exceptions import (
    RemoteError,
    RemoteUnavailableError,
    RemoteUnconfiguredError,
)
from issuehub.remote.models import RemoteIssue

__all__ = [
    "GitHubIssues",
    "RemoteAuthority",
    "RemoteError",
    "RemoteIssue",
    "RemoteUnavailableError",
    "RemoteUnconfiguredError",
    "compose_body",
    "split_body",
]
