"""Admission checks for queued items waiting on lockable resources."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import structlog

from lockable.resources.allocation import ResourceAllocator
from lockable.resources.pool import ResourcePool
from lockable.resources.requirements import ByName, Requirement


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class QueueItem:
    """A queued job as seen by the admission check."""
    item_id: str
    requirement: Requirement
    project: str = ""
    params: Dict[str, Any] = field(default_factory=dict)  # Matrix combination
    multi_configuration: bool = False  # Parent of a matrix job


@dataclass(frozen=True)
class BlockingReason:
    """Why an item cannot start yet."""
    requirement: Requirement

    @property
    def short_description(self) -> str:
        if isinstance(self.requirement, ByName):
            return f"Waiting for resources {self.requirement.describe()}"
        return f"Waiting for resources with label {self.requirement.describe()}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {"description": self.short_description}
        if isinstance(self.requirement, ByName):
            data["resources"] = list(self.requirement.names)
        else:
            data["labels"] = {lc.label: lc.count for lc in self.requirement.counts}
        return data

    def __str__(self) -> str:
        return self.short_description


@dataclass(frozen=True)
class AdmissionResult:
    """Result of one admission poll."""
    admitted: bool
    reserved: Tuple[str, ...] = ()
    reason: Optional[BlockingReason] = None

    @classmethod
    def admit(cls, reserved: Tuple[str, ...] = ()) -> "AdmissionResult":
        return cls(admitted=True, reserved=tuple(reserved))

    @classmethod
    def block(cls, reason: BlockingReason) -> "AdmissionResult":
        return cls(admitted=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "admitted": self.admitted,
            "reserved": list(self.reserved),
            "reason": self.reason.to_dict() if self.reason else None,
        }


class AdmissionAdapter:
    """Per-poll entry point for the external scheduler.

    The scheduler calls ``can_run`` repeatedly until the item is admitted.
    Once admitted, an item keeps its reservation across polls until the
    release hook runs.
    """

    def __init__(
        self,
        resource_pool: ResourcePool,
        allocator: Optional[ResourceAllocator] = None
    ):
        self.resource_pool = resource_pool
        self.allocator = allocator or ResourceAllocator(resource_pool)

    def can_run(self, item: QueueItem) -> AdmissionResult:
        """Admit ``item`` if its requirement can be reserved now."""
        # Only the child configurations of a matrix job lock resources.
        if item.multi_configuration:
            return AdmissionResult.admit()

        requirement = item.requirement
        if requirement.is_empty:
            return AdmissionResult.admit()

        with self.resource_pool.exclusive():
            existing = self.resource_pool.reservation_for(item.item_id)
            if existing is not None:
                return AdmissionResult.admit(existing)

            selected = self.allocator.allocate(requirement, item.item_id, item.params)

        if selected is None:
            reason = BlockingReason(requirement)
            logger.debug(
                "item_blocked",
                item_id=item.item_id,
                project=item.project,
                reason=reason.short_description,
            )
            return AdmissionResult.block(reason)

        logger.info(
            "item_admitted",
            item_id=item.item_id,
            project=item.project,
            resources=list(selected),
        )
        return AdmissionResult.admit(selected)

    def environment(self, item: QueueItem) -> Dict[str, str]:
        """Environment exposing the reserved names to an admitted job."""
        names_var = item.requirement.names_var
        if not names_var:
            return {}

        reserved = self.resource_pool.reservation_for(item.item_id)
        if reserved is None:
            return {}
        return {names_var: " ".join(reserved)}
