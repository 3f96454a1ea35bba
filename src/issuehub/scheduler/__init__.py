"""Scheduler - Timers and fire-and-forget tasks on the event loop."""

from issuehub.scheduler.background import BackgroundTasks
from issuehub.scheduler.timers import DelayedCall, PeriodicTask

__all__ = [
    "BackgroundTasks",
    "DelayedCall",
    "PeriodicTask",
]
