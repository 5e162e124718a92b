"""Dispatcher assignment use case."""

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    JobGatewayInterface,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.application.services.job_state_machine import JobStateMachine
from job_allocation.config.logging import get_logger
from job_allocation.domain.exceptions.allocation_error import (
    JobNotFoundError,
    TechnicianNotFoundError,
)

logger = get_logger(__name__)


class AssignJobUseCase:
    """Use case for binding a pending job to a dispatcher-chosen technician."""

    def __init__(
        self,
        job_gateway: JobGatewayInterface,
        technician_gateway: TechnicianGatewayInterface,
        state_machine: JobStateMachine,
        capacity_model: CapacityModel,
    ):
        self.job_gateway = job_gateway
        self.technician_gateway = technician_gateway
        self.state_machine = state_machine
        self.capacity_model = capacity_model

    async def execute(self, job_id: str, technician_id: str) -> AssignmentResponse:
        """Assign the job and return the authoritative job + technician pair."""

        # 1. Load current records
        job = await self.job_gateway.get_job(job_id)
        if not job:
            raise JobNotFoundError(job_id)

        technician = await self.technician_gateway.get_technician(technician_id)
        if not technician:
            raise TechnicianNotFoundError(technician_id)

        # 2. Validate the transition before touching the job service
        plan = self.state_machine.plan_assignment(job, technician.to_ref())

        # Soft capacity: operators may knowingly overbook a technician
        if self.capacity_model.at_capacity(technician):
            logger.warning(
                "Assigning job to technician at capacity",
                job_id=job_id,
                technician_id=technician_id,
                current_jobs=technician.current_jobs,
                max_jobs=technician.max_jobs,
            )

        # 3. Persist; the response replaces local state wholesale
        response = await self.job_gateway.assign_job(job_id, technician_id)

        logger.info(
            "Job assigned",
            job_id=job_id,
            technician_id=technician_id,
            from_status=plan.from_status.value,
            to_status=response.job.status.value,
            current_jobs=response.technician.current_jobs,
        )

        return response
