"""IssueHub - Real-time issue tracker mirrored from a remote tracker."""

__version__ = "0.1.0"
