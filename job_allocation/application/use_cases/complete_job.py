"""Complete job use case."""

from datetime import date
from typing import Optional

from job_allocation.application.interfaces.gateways import (
    CompletionRequest,
    JobGatewayInterface,
)
from job_allocation.application.services.job_state_machine import JobStateMachine
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.exceptions.allocation_error import (
    InvalidTransitionError,
    JobNotFoundError,
)
from job_allocation.domain.value_objects.job_status import JobStatus

logger = get_logger(__name__)


class CompleteJobUseCase:
    """
    Finalize a job with its report and optional invoice.

    The job service applies the status change, the completedAt stamp and the
    technician counter decrement as one request.
    """

    def __init__(self, job_gateway: JobGatewayInterface, state_machine: JobStateMachine):
        self.job_gateway = job_gateway
        self.state_machine = state_machine

    async def execute(
        self,
        job_id: str,
        request: CompletionRequest,
        actor_technician_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Job:
        job = await self.job_gateway.get_job(job_id)
        if not job:
            raise JobNotFoundError(job_id)

        if actor_technician_id and job.technician_id != actor_technician_id:
            raise InvalidTransitionError(
                job.status.value,
                JobStatus.COMPLETED.value,
                "only the assigned technician can complete this job",
            )

        self.state_machine.check_completion(job, today)

        completed = await self.job_gateway.complete_job(job_id, request)

        logger.info(
            "Job completed",
            job_id=job_id,
            technician_id=job.technician_id,
            has_invoice=request.has_invoice,
            total_cost=str(request.invoice.total_cost) if request.invoice else None,
        )

        return completed
