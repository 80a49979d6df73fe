"""Lockable resources: admission of queued jobs on shared named resources."""

__version__ = "0.1.0"

from lockable.resources.pool import ResourcePool
from lockable.resources.requirements import ByLabel, ByName, parse_requirement
from lockable.scheduler.admission import AdmissionAdapter, QueueItem
from lockable.scheduler.release import ReleaseHook

__all__ = [
    "ResourcePool",
    "ByName",
    "ByLabel",
    "parse_requirement",
    "AdmissionAdapter",
    "QueueItem",
    "ReleaseHook",
]
