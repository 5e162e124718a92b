"""
In-flight guard for user actions.

Only the same action on the same job is mutually exclusive; different jobs
proceed concurrently.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Set, Tuple

from job_allocation.config.logging import get_logger
from job_allocation.domain.exceptions.allocation_error import ActionInProgressError

logger = get_logger(__name__)


class ActionGuard:
    """Tracks outstanding (action, job_id) pairs on one event loop."""

    def __init__(self):
        self._in_flight: Set[Tuple[str, str]] = set()

    def is_busy(self, action: str, job_id: str) -> bool:
        return (action, job_id) in self._in_flight

    def in_progress_job_ids(self, action: str = None) -> Set[str]:
        """Job IDs with an outstanding request, used for "in progress" markers."""
        return {
            job_id
            for pending_action, job_id in self._in_flight
            if action is None or pending_action == action
        }

    @asynccontextmanager
    async def hold(self, action: str, job_id: str) -> AsyncIterator[None]:
        key = (action, job_id)
        if key in self._in_flight:
            logger.info("Duplicate action refused", action=action, job_id=job_id)
            raise ActionInProgressError(action, job_id)

        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)
