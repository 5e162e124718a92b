"""Create job use case."""

from job_allocation.application.interfaces.gateways import (
    JobDraft,
    JobGatewayInterface,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.exceptions.allocation_error import TechnicianNotFoundError
from job_allocation.domain.exceptions.validation_error import (
    RequiredFieldError,
    ValidationError,
)

logger = get_logger(__name__)


class CreateJobUseCase:
    """Use case for dispatcher job creation, optionally pre-assigned."""

    def __init__(
        self,
        job_gateway: JobGatewayInterface,
        technician_gateway: TechnicianGatewayInterface,
        capacity_model: CapacityModel,
    ):
        self.job_gateway = job_gateway
        self.technician_gateway = technician_gateway
        self.capacity_model = capacity_model

    async def execute(self, draft: JobDraft) -> Job:
        """Create a new job; with a technician it starts Scheduled."""

        logger.info(
            "Starting job creation",
            property_id=draft.property_id,
            job_type=draft.job_type.value,
            technician_id=draft.technician_id,
        )

        # 1. Validate required fields
        if not draft.property_id or not draft.property_id.strip():
            raise RequiredFieldError("property")
        if draft.due_date is None:
            raise RequiredFieldError("dueDate")

        # 2. Validate optional technician
        if draft.technician_id:
            technician = await self.technician_gateway.get_technician(
                draft.technician_id
            )
            if not technician:
                raise TechnicianNotFoundError(draft.technician_id)

            if not self.capacity_model.can_accept(technician):
                raise ValidationError(
                    f"Technician {technician.name} is not available",
                    {"assignedTechnician": "Please select an available technician"},
                )

        # 3. Persist
        job = await self.job_gateway.create_job(draft)

        logger.info(
            "Job created",
            job_id=job.id,
            status=job.status.value,
            technician_id=job.technician_id,
        )

        return job
