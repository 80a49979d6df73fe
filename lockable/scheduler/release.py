"""Release of reserved resources when a job finishes."""

from enum import Enum
from typing import Tuple

import structlog

from lockable.resources.pool import ReservationError, ResourcePool


logger = structlog.get_logger(__name__)


class JobOutcome(Enum):
    """Terminal states of a job."""
    SUCCESS = "success"
    FAILURE = "failure"
    ABORTED = "aborted"


class ReleaseHook:
    """Returns an item's resources to the pool when its job completes."""

    def __init__(self, resource_pool: ResourcePool):
        self.resource_pool = resource_pool

    def on_completed(
        self,
        item_id: str,
        outcome: JobOutcome = JobOutcome.SUCCESS
    ) -> Tuple[str, ...]:
        """Release everything held by ``item_id``; never raises."""
        try:
            released = self.resource_pool.release_all(item_id)
        except ReservationError:
            logger.error(
                "release_failed",
                item_id=item_id,
                outcome=outcome.value,
                exc_info=True,
            )
            return ()

        if released:
            logger.info(
                "job_completed",
                item_id=item_id,
                outcome=outcome.value,
                released=list(released),
            )
        return released
