"""Direct job edit use case."""

from job_allocation.application.interfaces.gateways import (
    JobGatewayInterface,
    JobUpdate,
    TechnicianGatewayInterface,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.application.services.job_state_machine import JobStateMachine
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.exceptions.allocation_error import (
    JobNotFoundError,
    TechnicianNotFoundError,
)
from job_allocation.domain.exceptions.validation_error import ValidationError

logger = get_logger(__name__)


class UpdateJobUseCase:
    """
    Trusted edit path: any status may be set.

    Moving into Pending or Cancelled is sent as a single request carrying
    ``assignedTechnician: null`` so the unassign and the status change land
    together. Plain status changes without side effects use the narrow
    status endpoint.
    """

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

    async def execute(self, job_id: str, update: JobUpdate) -> Job:
        job = await self.job_gateway.get_job(job_id)
        if not job:
            raise JobNotFoundError(job_id)

        if update.changes_technician and update.technician_id:
            technician = await self.technician_gateway.get_technician(
                update.technician_id
            )
            if not technician:
                raise TechnicianNotFoundError(update.technician_id)

            if not self.capacity_model.selectable_for_edit(technician, job.technician_id):
                raise ValidationError(
                    f"Technician {technician.name} is not available for assignment",
                    {"technician": "Please select an available technician"},
                )

        if update.status is not None and update.status.releases_technician():
            plan = self.state_machine.plan_demotion(job, update.status)
        else:
            plan = self.state_machine.plan_update(job, update)
        effective = self.state_machine.effective_update(update, plan)

        if effective.is_status_only and not plan.has_side_effects:
            updated = await self.job_gateway.update_job_status(job_id, effective.status)
        else:
            updated = await self.job_gateway.update_job(job_id, effective)

        if plan.released_technician:
            logger.info(
                "Technician released from job",
                job_id=job_id,
                technician_id=plan.released_technician.id,
                to_status=plan.to_status.value,
            )

        logger.info(
            "Job updated",
            job_id=job_id,
            from_status=plan.from_status.value,
            to_status=updated.status.value,
            technician_id=updated.technician_id,
            counter_deltas=plan.counter_deltas,
        )

        return updated
