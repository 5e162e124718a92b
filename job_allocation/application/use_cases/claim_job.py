"""Technician self-claim use case."""

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    JobGatewayInterface,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.job_state_machine import JobStateMachine
from job_allocation.config.logging import get_logger
from job_allocation.domain.exceptions.allocation_error import (
    JobNotClaimableError,
    JobNotFoundError,
    TechnicianNotFoundError,
)
from job_allocation.domain.exceptions.gateway_error import GatewayAPIError

logger = get_logger(__name__)


class ClaimJobUseCase:
    """Use case for a technician claiming an unassigned job."""

    def __init__(
        self,
        job_gateway: JobGatewayInterface,
        technician_gateway: TechnicianGatewayInterface,
        state_machine: JobStateMachine,
    ):
        self.job_gateway = job_gateway
        self.technician_gateway = technician_gateway
        self.state_machine = state_machine

    async def execute(self, job_id: str, technician_id: str) -> AssignmentResponse:
        job = await self.job_gateway.get_job(job_id)
        if not job:
            raise JobNotFoundError(job_id)

        technician = await self.technician_gateway.get_technician(technician_id)
        if not technician:
            raise TechnicianNotFoundError(technician_id)

        self.state_machine.plan_assignment(job, technician.to_ref())

        try:
            response = await self.job_gateway.claim_job(job_id, technician_id)
        except GatewayAPIError as e:
            # Someone else won the race between our read and the claim
            if e.is_precondition_failure:
                logger.info(
                    "Claim rejected by job service",
                    job_id=job_id,
                    technician_id=technician_id,
                    status_code=e.status_code,
                    error=e.message,
                )
                raise JobNotClaimableError(job_id, "unknown") from e
            raise

        logger.info(
            "Job claimed",
            job_id=job_id,
            technician_id=technician_id,
            current_jobs=response.technician.current_jobs,
        )

        return response
