"""Lockable resource pool, requirements and allocation."""

from lockable.resources.resource import LockableResource
from lockable.resources.pool import (
    ResourcePool,
    ResourceAllocationError,
    ConfigurationError,
    UnknownResourceError,
    DuplicateResourceError,
    ReservationError,
    ReservationConflictError,
    InconsistentReservationError
)
from lockable.resources.requirements import (
    ByName,
    ByLabel,
    LabelCount,
    Requirement,
    NO_RESOURCES,
    RequirementValidationError,
    ValidationReport,
    parse_requirement,
    validate_requirement
)
from lockable.resources.allocation import ResourceAllocator

__all__ = [
    # Pool
    "LockableResource",
    "ResourcePool",
    "ResourceAllocationError",
    "ConfigurationError",
    "UnknownResourceError",
    "DuplicateResourceError",
    "ReservationError",
    "ReservationConflictError",
    "InconsistentReservationError",

    # Requirements
    "ByName",
    "ByLabel",
    "LabelCount",
    "Requirement",
    "NO_RESOURCES",
    "RequirementValidationError",
    "ValidationReport",
    "parse_requirement",
    "validate_requirement",

    # Allocation
    "ResourceAllocator",
]
