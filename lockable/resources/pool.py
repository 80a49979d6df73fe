"""Resource pool implementation"""

import threading
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import structlog

from lockable.resources.resource import LockableResource


logger = structlog.get_logger(__name__)


class ResourceAllocationError(Exception):
    """Base class for resource allocation errors."""
    pass


class ConfigurationError(ResourceAllocationError):
    """Raised when a requirement or resource definition is invalid."""
    pass


class UnknownResourceError(ConfigurationError):
    """Raised when a requirement names a resource the pool does not have."""

    def __init__(self, names: Sequence[str]):
        self.names = list(names)
        super().__init__(f"The following resources do not exist: {self.names}")


class DuplicateResourceError(ConfigurationError):
    """Raised when two resource definitions share a name."""
    pass


class ReservationError(ResourceAllocationError):
    """Base class for reservation invariant violations."""
    pass


class ReservationConflictError(ReservationError):
    """Raised when reserving a missing or already held resource."""
    pass


class InconsistentReservationError(ReservationError):
    """Raised when a reservation record disagrees with resource state."""
    pass


class ResourcePool:
    """Owns every resource and every reservation record.

    All mutations run under a single re-entrant lock. Callers that need a
    read-then-reserve sequence to be atomic hold ``exclusive()`` around it.
    """

    def __init__(self, resources: Iterable[LockableResource] = ()):
        self._lock = threading.RLock()
        self._resources: Dict[str, LockableResource] = self._index(resources)
        self._reservations: Dict[str, Tuple[str, ...]] = {}

    @staticmethod
    def _index(resources: Iterable[LockableResource]) -> Dict[str, LockableResource]:
        indexed: Dict[str, LockableResource] = {}
        for resource in resources:
            if resource.name in indexed:
                raise DuplicateResourceError(
                    f"Resource {resource.name!r} is defined more than once"
                )
            indexed[resource.name] = resource
        return indexed

    def exclusive(self) -> threading.RLock:
        """The pool's exclusion domain."""
        return self._lock

    # Lookup

    def get(self, name: str) -> Optional[LockableResource]:
        with self._lock:
            return self._resources.get(name)

    def with_label(
        self,
        label: str,
        params: Optional[Mapping[str, Any]] = None
    ) -> List[LockableResource]:
        """Resources carrying ``label`` that satisfy ``params``, in pool order."""
        with self._lock:
            return [
                r for r in self._resources.values()
                if r.has_label(label) and r.matches(params)
            ]

    def is_free(self, resource: LockableResource) -> bool:
        return resource.is_free()

    def names(self) -> List[str]:
        with self._lock:
            return list(self._resources)

    def labels(self) -> List[str]:
        """All labels carried by at least one resource."""
        with self._lock:
            found = set()
            for resource in self._resources.values():
                found.update(resource.labels)
            return sorted(found)

    def is_valid_label(self, label: str) -> bool:
        with self._lock:
            return any(r.has_label(label) for r in self._resources.values())

    def reservation_for(self, item_id: str) -> Optional[Tuple[str, ...]]:
        with self._lock:
            return self._reservations.get(item_id)

    def reservations(self) -> Dict[str, Tuple[str, ...]]:
        with self._lock:
            return dict(self._reservations)

    def free_count(self) -> int:
        with self._lock:
            return sum(1 for r in self._resources.values() if r.is_free())

    def status(self) -> Dict[str, Any]:
        """Summary of pool occupancy."""
        with self._lock:
            return {
                "total": len(self._resources),
                "free": self.free_count(),
                "reserved": {
                    r.name: r.reserved_by
                    for r in self._resources.values() if not r.is_free()
                },
                "items": len(self._reservations),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)

    def __iter__(self) -> Iterator[LockableResource]:
        with self._lock:
            return iter(list(self._resources.values()))

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._resources

    # Mutation

    def reserve_all(self, names: Sequence[str], item_id: str) -> None:
        """Mark every named resource as held by ``item_id``.

        Nothing is changed unless every resource exists and is free and the
        item holds no reservation yet.
        """
        with self._lock:
            if item_id in self._reservations:
                raise ReservationConflictError(
                    f"Item {item_id} already holds {list(self._reservations[item_id])}"
                )

            for name in names:
                resource = self._resources.get(name)
                if resource is None:
                    raise ReservationConflictError(
                        f"Cannot reserve unknown resource {name!r}"
                    )
                if not resource.is_free():
                    raise ReservationConflictError(
                        f"Resource {name!r} is already reserved by {resource.reserved_by}"
                    )

            for name in names:
                self._resources[name].reserved_by = item_id
            self._reservations[item_id] = tuple(names)

        logger.info("resources_reserved", item_id=item_id, resources=list(names))

    def release_all(self, item_id: str) -> Tuple[str, ...]:
        """Return everything held by ``item_id`` to the free state."""
        with self._lock:
            names = self._reservations.get(item_id)
            if names is None:
                return ()

            for name in names:
                resource = self._resources.get(name)
                if resource is not None and resource.reserved_by != item_id:
                    raise InconsistentReservationError(
                        f"Item {item_id} records {name!r} but it is held by "
                        f"{resource.reserved_by}"
                    )

            for name in names:
                resource = self._resources.get(name)
                if resource is not None:
                    resource.reserved_by = None
            del self._reservations[item_id]

        logger.info("resources_released", item_id=item_id, resources=list(names))
        return names

    def replace_resources(self, resources: Iterable[LockableResource]) -> None:
        """Swap in a redefined resource set, keeping surviving reservations."""
        replacement = self._index(resources)

        with self._lock:
            for name, resource in replacement.items():
                current = self._resources.get(name)
                if current is not None:
                    resource.reserved_by = current.reserved_by

            for item_id, names in list(self._reservations.items()):
                kept = tuple(n for n in names if n in replacement)
                if len(kept) != len(names):
                    logger.warning(
                        "reservation_resources_removed",
                        item_id=item_id,
                        removed=[n for n in names if n not in replacement],
                    )
                if kept:
                    self._reservations[item_id] = kept
                else:
                    del self._reservations[item_id]

            self._resources = replacement

        logger.info("resources_replaced", total=len(replacement))
