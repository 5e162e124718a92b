"""
In-process compliance service for development and tests.

Applies the same rules the job service enforces: only unassigned Pending jobs
can be claimed, counters move with assignments, demotion unassigns, and
completion frees capacity and stamps ``completed_at``.
"""

import asyncio
from copy import deepcopy
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    CompletionRequest,
    JobDraft,
    JobFilters,
    JobGatewayInterface,
    JobPage,
    JobUpdate,
    Pagination,
    TechnicianFilters,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.application.services.job_presentation import status_counts
from job_allocation.application.services.job_state_machine import JobStateMachine
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.invoice import Invoice
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.exceptions.allocation_error import (
    AllocationError,
    JobNotClaimableError,
)
from job_allocation.domain.exceptions.gateway_error import GatewayAPIError
from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.references import PropertyRef

logger = get_logger(__name__)


class InMemoryComplianceGateway(JobGatewayInterface, TechnicianGatewayInterface):
    """Job and technician store held in process memory."""

    def __init__(
        self,
        state_machine: Optional[JobStateMachine] = None,
        capacity_model: Optional[CapacityModel] = None,
    ):
        self.capacity_model = capacity_model or CapacityModel()
        self.state_machine = state_machine or JobStateMachine(self.capacity_model)
        self.jobs: Dict[str, Job] = {}
        self.technicians: Dict[str, Technician] = {}
        self.properties: Dict[str, PropertyRef] = {}
        self.invoices: Dict[str, Invoice] = {}
        self.reports: Dict[str, str] = {}
        self._sequence = 0
        self._lock = asyncio.Lock()

    def seed(
        self,
        jobs: Iterable[Job] = (),
        technicians: Iterable[Technician] = (),
        properties: Iterable[PropertyRef] = (),
    ) -> None:
        """Load fixture data, replacing records with the same id."""
        for technician in technicians:
            self.technicians[technician.id] = deepcopy(technician)
        for prop in properties:
            self.properties[prop.id] = prop
        for job in jobs:
            self.jobs[job.id] = deepcopy(job)
            if job.property_ref:
                self.properties.setdefault(job.property_ref.id, job.property_ref)

    async def close(self) -> None:
        pass

    # Helpers

    def _job(self, job_id: str) -> Job:
        job = self.jobs.get(job_id)
        if job is None:
            raise GatewayAPIError(404, "Job not found")
        return job

    def _technician(self, technician_id: str) -> Technician:
        technician = self.technicians.get(technician_id)
        if technician is None:
            raise GatewayAPIError(404, "Technician not found")
        return technician

    def _move_counter(self, technician_id: str, delta: int) -> None:
        technician = self.technicians.get(technician_id)
        if technician is None:
            logger.warning(
                "Counter change for unknown technician", technician_id=technician_id
            )
            return

        updated = self.capacity_model.apply_assignment_delta(technician, delta)
        if updated.availability == Availability.AVAILABLE and self.capacity_model.at_capacity(
            updated
        ):
            updated = replace(updated, availability=Availability.BUSY)
        elif updated.availability == Availability.BUSY and updated.has_spare_capacity:
            updated = replace(updated, availability=Availability.AVAILABLE)
        self.technicians[technician_id] = updated

    def _apply_deltas(self, deltas: Dict[str, int]) -> None:
        for technician_id, delta in deltas.items():
            self._move_counter(technician_id, delta)

    @staticmethod
    def _rejection(exc: AllocationError) -> GatewayAPIError:
        if isinstance(exc, JobNotClaimableError):
            return GatewayAPIError(409, "Job is no longer available")
        return GatewayAPIError(400, str(exc))

    def _page(self, jobs: List[Job], filters: JobFilters) -> JobPage:
        counts = status_counts(jobs)
        limit = max(filters.limit, 1)
        total_pages = max((len(jobs) + limit - 1) // limit, 1)
        start = (max(filters.page, 1) - 1) * limit
        return JobPage(
            jobs=[deepcopy(job) for job in jobs[start : start + limit]],
            pagination=Pagination(
                current_page=filters.page,
                total_pages=total_pages,
                total_items=len(jobs),
                items_per_page=limit,
                has_next_page=filters.page < total_pages,
                has_prev_page=filters.page > 1,
            ),
            status_counts=counts,
        )

    def _filter_jobs(self, jobs: Iterable[Job], filters: JobFilters) -> List[Job]:
        result = list(jobs)
        if filters.status:
            result = [job for job in result if job.status.value == filters.status]
        if filters.job_type:
            result = [job for job in result if job.job_type.value == filters.job_type]
        if filters.priority:
            result = [
                job
                for job in result
                if job.priority and job.priority.value == filters.priority
            ]
        if filters.assigned_technician:
            result = [
                job
                for job in result
                if job.technician_id == filters.assigned_technician
            ]
        if filters.search:
            result = [job for job in result if job.matches_search(filters.search)]
        return result

    # Technicians

    async def list_technicians(
        self, filters: Optional[TechnicianFilters] = None
    ) -> List[Technician]:
        filters = filters or TechnicianFilters()
        result = list(self.technicians.values())
        if filters.availability:
            result = [t for t in result if t.availability.value == filters.availability]
        if filters.status:
            result = [t for t in result if t.status == filters.status]
        if filters.search:
            needle = filters.search.lower()
            result = [
                t for t in result if needle in t.name.lower() or needle in t.email.lower()
            ]
        return [deepcopy(t) for t in result[: filters.limit]]

    async def get_technician(self, technician_id: str) -> Optional[Technician]:
        technician = self.technicians.get(technician_id)
        return deepcopy(technician) if technician else None

    # Jobs

    async def list_jobs(self, filters: Optional[JobFilters] = None) -> JobPage:
        filters = filters or JobFilters()
        return self._page(self._filter_jobs(self.jobs.values(), filters), filters)

    async def get_job(self, job_id: str) -> Optional[Job]:
        job = self.jobs.get(job_id)
        return deepcopy(job) if job else None

    async def create_job(self, draft: JobDraft) -> Job:
        async with self._lock:
            technician = None
            if draft.technician_id:
                technician = self._technician(draft.technician_id)

            self._sequence += 1
            now = datetime.now(timezone.utc)
            prop = self.properties.get(draft.property_id) or PropertyRef(
                id=draft.property_id
            )

            job = Job(
                id=uuid4().hex,
                job_id=f"{self._sequence:06d}",
                job_type=draft.job_type,
                status=JobStatus.SCHEDULED if technician else JobStatus.PENDING,
                priority=draft.priority,
                due_date=draft.due_date,
                property_ref=prop,
                technician=technician.to_ref() if technician else None,
                description=draft.description,
                notes=draft.notes,
                created_at=now,
                updated_at=now,
            )
            self.jobs[job.id] = job
            if technician:
                self._move_counter(technician.id, 1)

            return deepcopy(job)

    async def update_job(self, job_id: str, update: JobUpdate) -> Job:
        async with self._lock:
            job = self._job(job_id)
            if update.changes_technician and update.technician_id:
                self._technician(update.technician_id)

            plan = self.state_machine.plan_update(job, update)

            if update.job_type is not None:
                job.job_type = update.job_type
            if update.due_date is not None:
                job.reschedule(update.due_date)
            if update.priority is not None:
                job.priority = update.priority
            if update.description is not None:
                job.description = update.description

            self._apply_plan(job, plan.to_status, plan.technician_id)
            self._apply_deltas(plan.counter_deltas)
            return deepcopy(job)

    async def update_job_status(self, job_id: str, status: JobStatus) -> Job:
        async with self._lock:
            job = self._job(job_id)
            plan = self.state_machine.plan_update(job, JobUpdate(status=status))
            self._apply_plan(job, plan.to_status, plan.technician_id)
            self._apply_deltas(plan.counter_deltas)
            return deepcopy(job)

    def _apply_plan(
        self, job: Job, to_status: JobStatus, technician_id: Optional[str]
    ) -> None:
        if technician_id is None:
            job.unassign()
        elif technician_id != job.technician_id:
            job.technician = self.technicians[technician_id].to_ref()

        if to_status == JobStatus.COMPLETED and job.status != JobStatus.COMPLETED:
            job.completed_at = datetime.now(timezone.utc)
        job.status = to_status
        job.updated_at = datetime.now(timezone.utc)

    async def assign_job(self, job_id: str, technician_id: str) -> AssignmentResponse:
        return await self._bind(job_id, technician_id)

    async def claim_job(self, job_id: str, technician_id: str) -> AssignmentResponse:
        return await self._bind(job_id, technician_id)

    async def _bind(self, job_id: str, technician_id: str) -> AssignmentResponse:
        async with self._lock:
            job = self._job(job_id)
            technician = self._technician(technician_id)

            try:
                plan = self.state_machine.plan_assignment(job, technician.to_ref())
            except AllocationError as e:
                raise self._rejection(e)

            job.assign_to(technician.to_ref())
            self._apply_deltas(plan.counter_deltas)

            return AssignmentResponse(
                job=deepcopy(job), technician=deepcopy(self.technicians[technician_id])
            )

    async def complete_job(self, job_id: str, request: CompletionRequest) -> Job:
        async with self._lock:
            job = self._job(job_id)

            try:
                plan = self.state_machine.plan_completion(job)
            except AllocationError as e:
                raise self._rejection(e)

            if request.invoice is not None:
                invoice_id = uuid4().hex
                self.invoices[invoice_id] = request.invoice
                job.has_invoice = True
                job.invoice_id = invoice_id

            self.reports[job_id] = request.report.filename
            job.mark_completed()
            self._apply_deltas(plan.counter_deltas)

            return deepcopy(job)

    async def list_available_jobs(
        self, filters: Optional[JobFilters] = None
    ) -> JobPage:
        filters = filters or JobFilters()
        claimable = [job for job in self.jobs.values() if job.is_claimable()]
        return self._page(self._filter_jobs(claimable, filters), filters)
