"""Resource allocation for lockable resource requirements."""

from typing import Any, List, Mapping, Optional, Set, Tuple

import structlog

from lockable.resources.pool import ResourcePool, UnknownResourceError
from lockable.resources.requirements import ByLabel, ByName, Requirement


logger = structlog.get_logger(__name__)


class ResourceAllocator:
    """Greedy first-fit selection of free resources.

    Selection scans the pool in definition order; the first free matches
    win. A requirement is either reserved in full or not at all.
    """

    def __init__(self, resource_pool: ResourcePool):
        self.resource_pool = resource_pool

    def allocate(
        self,
        requirement: Requirement,
        item_id: str,
        params: Optional[Mapping[str, Any]] = None
    ) -> Optional[Tuple[str, ...]]:
        """Reserve resources for ``item_id``.

        Returns the reserved names, or None when not enough matching
        resources are free right now. Unknown explicit names raise
        UnknownResourceError.
        """
        if requirement.is_empty:
            return ()

        with self.resource_pool.exclusive():
            selected = self.select(requirement, params)
            if selected is None:
                return None

            self.resource_pool.reserve_all(selected, item_id)
            return selected

    def select(
        self,
        requirement: Requirement,
        params: Optional[Mapping[str, Any]] = None
    ) -> Optional[Tuple[str, ...]]:
        """Pick resources for ``requirement`` without reserving them."""
        with self.resource_pool.exclusive():
            if isinstance(requirement, ByName):
                return self._select_by_name(requirement)
            if isinstance(requirement, ByLabel):
                return self._select_by_label(requirement, params)

        raise TypeError(f"Unsupported requirement type: {type(requirement).__name__}")

    def _select_by_name(self, requirement: ByName) -> Optional[Tuple[str, ...]]:
        names = tuple(dict.fromkeys(requirement.names))

        missing = [name for name in names if name not in self.resource_pool]
        if missing:
            raise UnknownResourceError(missing)

        busy = [
            name for name in names
            if not self.resource_pool.is_free(self.resource_pool.get(name))
        ]
        if busy:
            logger.debug("resources_busy", resources=busy)
            return None

        return names

    def _select_by_label(
        self,
        requirement: ByLabel,
        params: Optional[Mapping[str, Any]]
    ) -> Optional[Tuple[str, ...]]:
        selected: List[str] = []
        taken: Set[str] = set()

        for label, count in requirement.counts:
            if count <= 0:
                continue

            candidates = [
                resource.name
                for resource in self.resource_pool.with_label(label, params)
                if self.resource_pool.is_free(resource) and resource.name not in taken
            ]

            if len(candidates) < count:
                logger.debug(
                    "label_short",
                    label=label,
                    needed=count,
                    free=len(candidates),
                )
                return None

            chosen = candidates[:count]
            selected.extend(chosen)
            taken.update(chosen)

        return tuple(selected)
