"""
Allocation board snapshot.

Holds the jobs and technicians an operator is working against. Local state is
never patched counter-by-counter: a mutation replaces the affected job and
technician records wholesale from the authoritative response, or the whole
snapshot is refetched.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    JobFilters,
    JobGatewayInterface,
    TechnicianFilters,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.application.services.job_presentation import (
    ALL,
    AvailableJobFilters,
    filter_available_jobs,
    filter_technicians_by_skill,
    pending_jobs,
    search_jobs,
    sort_jobs,
    status_counts,
)
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.availability import Availability

logger = get_logger(__name__)


@dataclass
class BoardStatistics:
    """Headline counts shown above the allocation board."""

    pending_jobs: int = 0
    available_technicians: int = 0
    technicians_at_capacity: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "pending_jobs": self.pending_jobs,
            "available_technicians": self.available_technicians,
            "technicians_at_capacity": self.technicians_at_capacity,
            "status_counts": dict(self.status_counts),
        }


@dataclass
class BoardView:
    """Sorted and filtered projection of the snapshot."""

    pending_jobs: List[Job]
    technicians: List[Technician]
    statistics: BoardStatistics
    in_progress_job_ids: Set[str] = field(default_factory=set)


class AllocationBoard:
    """Jobs and technicians snapshot for the dispatcher view."""

    def __init__(
        self,
        job_gateway: JobGatewayInterface,
        technician_gateway: TechnicianGatewayInterface,
        capacity_model: Optional[CapacityModel] = None,
    ):
        self.job_gateway = job_gateway
        self.technician_gateway = technician_gateway
        self.capacity_model = capacity_model or CapacityModel()
        self.jobs: List[Job] = []
        self.technicians: List[Technician] = []
        self.loaded = False

    async def refresh(self) -> None:
        """
        Replace the whole snapshot from the job service.

        Technicians are fetched first so job technician references can be
        resolved against them.
        """
        technicians = await self.technician_gateway.list_technicians(
            TechnicianFilters()
        )
        page = await self.job_gateway.list_jobs(JobFilters())

        self.technicians = technicians
        self.jobs = page.jobs
        self.loaded = True

        logger.info(
            "Allocation board refreshed",
            jobs=len(self.jobs),
            technicians=len(self.technicians),
        )

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.refresh()

    def get_job(self, job_id: str) -> Optional[Job]:
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None

    def get_technician(self, technician_id: str) -> Optional[Technician]:
        for technician in self.technicians:
            if technician.id == technician_id:
                return technician
        return None

    def replace_job(self, job: Job) -> None:
        """Swap in the authoritative job record, appending if unknown."""
        self.jobs = [job if existing.id == job.id else existing for existing in self.jobs]
        if self.get_job(job.id) is None:
            self.jobs.append(job)

    def replace_technician(self, technician: Technician) -> None:
        self.technicians = [
            technician if existing.id == technician.id else existing
            for existing in self.technicians
        ]
        if self.get_technician(technician.id) is None:
            self.technicians.append(technician)

    def apply_assignment(self, response: AssignmentResponse) -> None:
        """Replace the job and technician slices from a combined response."""
        self.replace_job(response.job)
        self.replace_technician(response.technician)

    def statistics(self, today: date) -> BoardStatistics:
        return BoardStatistics(
            pending_jobs=len(pending_jobs(self.jobs)),
            available_technicians=len(
                [t for t in self.technicians if t.availability == Availability.AVAILABLE]
            ),
            technicians_at_capacity=len(
                [t for t in self.technicians if self.capacity_model.at_capacity(t)]
            ),
            status_counts=status_counts(self.jobs, today),
        )

    def view(
        self,
        today: date,
        sort_by: Optional[str] = None,
        descending: bool = False,
        skill: str = ALL,
        search: Optional[str] = None,
        in_progress_job_ids: Optional[Set[str]] = None,
    ) -> BoardView:
        jobs = search_jobs(pending_jobs(self.jobs), search)
        return BoardView(
            pending_jobs=sort_jobs(jobs, sort_by, descending),
            technicians=filter_technicians_by_skill(self.technicians, skill),
            statistics=self.statistics(today),
            in_progress_job_ids=set(in_progress_job_ids or ()),
        )


class AvailableJobsBoard:
    """Technician-facing list of claimable jobs."""

    def __init__(self, job_gateway: JobGatewayInterface):
        self.job_gateway = job_gateway
        self.jobs: List[Job] = []
        self.loaded = False

    async def load(self) -> None:
        page = await self.job_gateway.list_available_jobs(JobFilters())
        self.jobs = [job for job in page.jobs if job.is_claimable()]
        self.loaded = True

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.load()

    def remove(self, job_id: str) -> None:
        """Drop a job once anyone has claimed it."""
        self.jobs = [job for job in self.jobs if job.id != job_id]

    def view(self, filters: Optional[AvailableJobFilters] = None) -> List[Job]:
        return filter_available_jobs(self.jobs, filters or AvailableJobFilters())
