"""
Technician capacity model: eligibility, workload buckets and counter deltas.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.workload_level import WorkloadLevel

logger = get_logger(__name__)


class CapacityModel:
    """Derived predicates over technician capacity."""

    def __init__(self):
        self.logger = logger

    def can_accept(self, technician: Technician) -> bool:
        """Eligibility for initial assignment in creation flows."""
        return technician.availability == Availability.AVAILABLE

    def eligible_for_assignment(
        self, technicians: Sequence[Technician]
    ) -> List[Technician]:
        return [t for t in technicians if self.can_accept(t)]

    def selectable_for_edit(
        self, technician: Technician, current_technician_id: Optional[str]
    ) -> bool:
        """
        Eligibility when re-assigning an existing job.

        Busy technicians stay selectable, as does whoever already holds the
        job, so corrective edits do not require an unassign first.
        """
        if current_technician_id and technician.id == current_technician_id:
            return True
        return technician.availability.selectable_for_edit()

    def eligible_for_edit(
        self,
        technicians: Sequence[Technician],
        current_technician_id: Optional[str],
    ) -> List[Technician]:
        return [
            t
            for t in technicians
            if self.selectable_for_edit(t, current_technician_id)
        ]

    def workload_level(self, current_jobs: int, max_jobs: int) -> WorkloadLevel:
        return WorkloadLevel.from_capacity(current_jobs, max_jobs)

    def at_capacity(self, technician: Technician) -> bool:
        """True when one more job would exceed ``max_jobs``."""
        return technician.current_jobs >= technician.max_jobs

    def apply_assignment_delta(self, technician: Technician, delta: int) -> Technician:
        """
        Return a copy of the technician with ``current_jobs`` moved by delta.

        The result is a local projection only; the persisted counter from the
        job service always replaces it once the request resolves.
        """
        new_count = max(0, technician.current_jobs + delta)
        if technician.current_jobs + delta < 0:
            self.logger.warning(
                "Clamped technician job counter at zero",
                technician_id=technician.id,
                current_jobs=technician.current_jobs,
                delta=delta,
            )
        return replace(technician, current_jobs=new_count)

    def reassignment_deltas(
        self,
        old_technician_id: Optional[str],
        new_technician_id: Optional[str],
    ) -> Dict[str, int]:
        """Counter changes for moving a job between technicians."""
        deltas: Dict[str, int] = {}
        if old_technician_id:
            deltas[old_technician_id] = deltas.get(old_technician_id, 0) - 1
        if new_technician_id:
            deltas[new_technician_id] = deltas.get(new_technician_id, 0) + 1
        return {tech_id: d for tech_id, d in deltas.items() if d != 0}
