"""
Job status state machine.

Guarded transitions used by the allocation and completion flows, plus the
trusted direct-edit path. Both paths carry the compound unassign whenever a
job moves into Pending or Cancelled while holding a technician.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Optional

from job_allocation.application.interfaces.gateways import UNCHANGED, JobUpdate
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.exceptions.allocation_error import (
    CompletionNotDueError,
    InvalidTransitionError,
    JobNotClaimableError,
)
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.references import TechnicianRef

logger = get_logger(__name__)


def utc_today() -> date:
    """Current calendar day in UTC."""
    return datetime.now(timezone.utc).date()


@dataclass
class TransitionPlan:
    """Outcome of planning a status change."""

    job_id: str
    from_status: JobStatus
    to_status: JobStatus
    technician_id: Optional[str]
    released_technician: Optional[TechnicianRef] = None
    counter_deltas: Dict[str, int] = field(default_factory=dict)

    @property
    def clears_technician(self) -> bool:
        return self.released_technician is not None and self.technician_id is None

    @property
    def has_side_effects(self) -> bool:
        return bool(self.counter_deltas) or self.clears_technician


class JobStateMachine:
    """Valid job statuses, legal transitions and their side effects."""

    def __init__(self, capacity_model: Optional[CapacityModel] = None):
        self.capacity_model = capacity_model or CapacityModel()
        self.logger = logger

    def plan_assignment(self, job: Job, technician: TechnicianRef) -> TransitionPlan:
        """Pending -> Scheduled through dispatcher assignment or self-claim."""
        if not job.is_claimable():
            raise JobNotClaimableError(job.id, job.status.value)

        return TransitionPlan(
            job_id=job.id,
            from_status=job.status,
            to_status=JobStatus.SCHEDULED,
            technician_id=technician.id,
            counter_deltas={technician.id: 1},
        )

    def check_completion(self, job: Job, today: Optional[date] = None) -> None:
        """
        Scheduled -> Completed gate.

        Completion is allowed once the due date has arrived (due today or
        past due); a future due date is rejected.
        """
        today = today or utc_today()

        if not job.status.can_be_completed():
            raise InvalidTransitionError(
                job.status.value,
                JobStatus.COMPLETED.value,
                "only scheduled jobs can be completed",
            )

        if not job.is_assigned:
            raise InvalidTransitionError(
                job.status.value,
                JobStatus.COMPLETED.value,
                "job has no assigned technician",
            )

        if job.due_day is None:
            raise InvalidTransitionError(
                job.status.value, JobStatus.COMPLETED.value, "job has no due date"
            )

        if not job.is_due(today):
            raise CompletionNotDueError(job.id, job.due_day)

    def plan_completion(self, job: Job, today: Optional[date] = None) -> TransitionPlan:
        self.check_completion(job, today)
        return TransitionPlan(
            job_id=job.id,
            from_status=job.status,
            to_status=JobStatus.COMPLETED,
            technician_id=job.technician_id,
            counter_deltas={job.technician_id: -1},
        )

    def plan_demotion(self, job: Job, target: JobStatus) -> TransitionPlan:
        """Any status -> Pending / Cancelled, releasing the technician."""
        if not target.releases_technician():
            raise InvalidTransitionError(
                job.status.value, target.value, "not a demotion target"
            )
        return self.plan_update(job, JobUpdate(status=target))

    def plan_update(self, job: Job, update: JobUpdate) -> TransitionPlan:
        """
        Trusted direct-edit path.

        Any status may be set. Entering Pending or Cancelled always clears the
        technician. Setting a technician on a job that would otherwise stay
        Pending schedules it. The old technician is released exactly once and
        the new one consumed exactly once; re-saving the same technician is a
        no-op on counters.
        """
        target_status = update.status or job.status
        technician_id = (
            update.technician_id if update.changes_technician else job.technician_id
        )

        if (
            technician_id
            and update.status is None
            and target_status == JobStatus.PENDING
        ):
            target_status = JobStatus.SCHEDULED

        if (
            update.changes_technician
            and technician_id is None
            and update.status is None
            and target_status in (JobStatus.SCHEDULED, JobStatus.OVERDUE)
        ):
            target_status = JobStatus.PENDING

        if target_status.releases_technician():
            technician_id = None

        old_holds = job.is_assigned and job.status.holds_capacity()
        new_holds = technician_id is not None and target_status.holds_capacity()

        deltas = self.capacity_model.reassignment_deltas(
            job.technician_id if old_holds else None,
            technician_id if new_holds else None,
        )

        released = None
        if job.is_assigned and job.technician_id != technician_id:
            released = job.technician

        plan = TransitionPlan(
            job_id=job.id,
            from_status=job.status,
            to_status=target_status,
            technician_id=technician_id,
            released_technician=released,
            counter_deltas=deltas,
        )

        self.logger.debug(
            "Planned job update",
            job_id=job.id,
            from_status=job.status.value,
            to_status=target_status.value,
            technician_id=technician_id,
            counter_deltas=deltas,
        )

        return plan

    def effective_update(self, update: JobUpdate, plan: TransitionPlan) -> JobUpdate:
        """Rewrite a requested update so it carries the planned side effects."""
        if plan.clears_technician:
            technician_id = None
        elif update.changes_technician:
            technician_id = plan.technician_id
        else:
            technician_id = UNCHANGED

        status = update.status
        if status is None and plan.to_status != plan.from_status:
            status = plan.to_status

        return JobUpdate(
            job_type=update.job_type,
            due_date=update.due_date,
            technician_id=technician_id,
            status=status,
            priority=update.priority,
            description=update.description,
        )
