"""Reconciler - Replaces the mirror with the remote tracker's state."""

from issuehub.reconciler.models import ResyncResult, ResyncStatus
from issuehub.reconciler.reconciler import Reconciler, remote_to_issue

__all__ = [
    "Reconciler",
    "ResyncResult",
    "ResyncStatus",
    "remote_to_issue",
]
