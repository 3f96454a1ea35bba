"""Custom exceptions for the remote issue tracker client."""


class RemoteError(Exception):
    """Base exception for remote tracker errors."""


class RemoteUnavailableError(RemoteError):
    """The tracker could not be reached or rejected the call (network, auth, rate limit)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteUnconfiguredError(RemoteError):
    """No repository or credentials are configured for the tracker."""
