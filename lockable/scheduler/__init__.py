"""Scheduler-facing admission and release hooks."""

from lockable.scheduler.admission import (
    AdmissionAdapter,
    AdmissionResult,
    BlockingReason,
    QueueItem
)
from lockable.scheduler.release import JobOutcome, ReleaseHook

__all__ = [
    "AdmissionAdapter",
    "AdmissionResult",
    "BlockingReason",
    "QueueItem",
    "JobOutcome",
    "ReleaseHook",
]
