"""
Allocation action boundary.

Every user action (assign, claim, complete, edit, create) resolves to an
``ActionResult``. Use cases raise domain exceptions; they are classified and
logged here and never propagate past a single action.
"""

from datetime import date
from typing import Awaitable, Callable, List, Optional, TypeVar
from uuid import uuid4

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    JobDraft,
    JobGatewayInterface,
    JobUpdate,
    TechnicianGatewayInterface,
)
from job_allocation.application.results import ActionResult, ErrorType
from job_allocation.application.services.action_guard import ActionGuard
from job_allocation.application.services.allocation_board import (
    AllocationBoard,
    AvailableJobsBoard,
    BoardView,
)
from job_allocation.application.services.capacity_model import CapacityModel
from job_allocation.application.services.completion_form import CompletionForm
from job_allocation.application.services.job_presentation import (
    ALL,
    AvailableJobFilters,
    urgent_jobs,
)
from job_allocation.application.services.job_state_machine import (
    JobStateMachine,
    utc_today,
)
from job_allocation.application.use_cases.assign_job import AssignJobUseCase
from job_allocation.application.use_cases.claim_job import ClaimJobUseCase
from job_allocation.application.use_cases.complete_job import CompleteJobUseCase
from job_allocation.application.use_cases.create_job import CreateJobUseCase
from job_allocation.application.use_cases.update_job import UpdateJobUseCase
from job_allocation.config.logging import get_logger
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.exceptions.allocation_error import (
    ActionInProgressError,
    JobNotFoundError,
)
from job_allocation.domain.exceptions.validation_error import ValidationError
from job_allocation.infrastructure.monitoring.metrics import (
    record_allocation_action,
    record_board_refresh,
    record_job_completion,
    track_action_duration,
)

logger = get_logger(__name__)

T = TypeVar("T")


class AllocationCoordinator:
    """Runs allocation actions against the board snapshot."""

    def __init__(
        self,
        job_gateway: JobGatewayInterface,
        technician_gateway: TechnicianGatewayInterface,
        capacity_model: Optional[CapacityModel] = None,
        state_machine: Optional[JobStateMachine] = None,
        guard: Optional[ActionGuard] = None,
        refresh_after_assign: bool = True,
        report_content_type: str = "application/pdf",
        clock: Callable[[], date] = utc_today,
    ):
        self.capacity_model = capacity_model or CapacityModel()
        self.state_machine = state_machine or JobStateMachine(self.capacity_model)
        self.guard = guard or ActionGuard()
        self.refresh_after_assign = refresh_after_assign
        self.report_content_type = report_content_type
        self.clock = clock

        self.board = AllocationBoard(
            job_gateway, technician_gateway, self.capacity_model
        )
        self.available_jobs = AvailableJobsBoard(job_gateway)

        self.assign_job = AssignJobUseCase(
            job_gateway, technician_gateway, self.state_machine, self.capacity_model
        )
        self.claim_job = ClaimJobUseCase(
            job_gateway, technician_gateway, self.state_machine
        )
        self.complete_job = CompleteJobUseCase(job_gateway, self.state_machine)
        self.update_job = UpdateJobUseCase(
            job_gateway, technician_gateway, self.state_machine, self.capacity_model
        )
        self.create_job = CreateJobUseCase(
            job_gateway, technician_gateway, self.capacity_model
        )

    async def _run(
        self, action: str, key: str, operation: Callable[[], Awaitable[T]]
    ) -> ActionResult[T]:
        try:
            async with self.guard.hold(action, key):
                data = await operation()
        except ActionInProgressError as e:
            record_allocation_action(action, "in_progress")
            return ActionResult.failure(ErrorType.PRECONDITION, str(e))
        except Exception as e:
            result: ActionResult[T] = ActionResult.from_exception(e)
            record_allocation_action(action, result.error_type.value)

            if result.error_type == ErrorType.TRANSIENT:
                logger.error(
                    "Allocation action failed",
                    action=action,
                    key=key,
                    error_type=result.error_type.value,
                    error=str(e),
                    exc_info=True,
                )
            else:
                logger.warning(
                    "Allocation action rejected",
                    action=action,
                    key=key,
                    error_type=result.error_type.value,
                    error=str(e),
                    field_errors=result.field_errors or None,
                )

            if result.error_type.requires_refresh:
                await self._refresh_quietly(f"{action}_rejected")
            return result

        record_allocation_action(action, "success")
        return ActionResult.ok(data)

    async def _refresh_quietly(self, reason: str) -> None:
        """Refetch after a mutation; a failed refetch is logged, not raised."""
        record_board_refresh(reason)
        try:
            await self.board.refresh()
            if self.available_jobs.loaded:
                await self.available_jobs.load()
        except Exception as e:
            logger.error("Board refresh failed", reason=reason, error=str(e))

    # Actions

    async def refresh(self) -> ActionResult[None]:
        async def operation() -> None:
            record_board_refresh("manual")
            await self.board.refresh()
            await self.available_jobs.load()

        return await self._run("refresh", "board", operation)

    @track_action_duration("assign")
    async def assign(self, job_id: str, technician_id: str) -> ActionResult[AssignmentResponse]:
        """Dispatcher assignment of a pending job."""

        async def operation() -> AssignmentResponse:
            if not technician_id:
                raise ValidationError(
                    "Please select a technician", {"technician": "Technician is required"}
                )
            if self.board.loaded and self.board.get_technician(technician_id) is None:
                raise ValidationError(
                    f"Technician {technician_id} not found",
                    {"technician": "Please select a valid technician"},
                )
            response = await self.assign_job.execute(job_id, technician_id)
            self.board.apply_assignment(response)
            self.available_jobs.remove(job_id)
            return response

        result = await self._run("assign", job_id, operation)
        if result.success:
            result.message = f"Job assigned to {result.data.technician.name}"
            if self.refresh_after_assign:
                await self._refresh_quietly("assign")
        return result

    @track_action_duration("claim")
    async def claim(self, job_id: str, technician_id: str) -> ActionResult[AssignmentResponse]:
        """Technician self-claim; the job leaves the available list on success."""

        async def operation() -> AssignmentResponse:
            response = await self.claim_job.execute(job_id, technician_id)
            self.available_jobs.remove(job_id)
            if self.board.loaded:
                self.board.apply_assignment(response)
            return response

        result = await self._run("claim", job_id, operation)
        if result.success:
            result.message = "Job claimed successfully"
            if self.refresh_after_assign and self.board.loaded:
                await self._refresh_quietly("claim")
        return result

    @track_action_duration("complete")
    async def complete(
        self,
        job_id: str,
        form: CompletionForm,
        actor_technician_id: Optional[str] = None,
    ) -> ActionResult[Job]:
        """
        Submit a completion form.

        Validation failures never reach the job service. On any failure the
        form keeps its data so the operator can retry.
        """

        async def operation() -> Job:
            form.begin_submit()
            try:
                request = form.build_request()
                job = await self.complete_job.execute(
                    job_id, request, actor_technician_id, today=self.clock()
                )
            finally:
                form.end_submit()
            record_job_completion(request.has_invoice)
            return job

        result = await self._run("complete", job_id, operation)
        if result.success:
            result.message = "Job completed successfully"
            form.reset()
            await self._refresh_quietly("complete")
        return result

    @track_action_duration("update")
    async def update(self, job_id: str, update: JobUpdate) -> ActionResult[Job]:
        """Direct edit, including compound demotion."""

        async def operation() -> Job:
            return await self.update_job.execute(job_id, update)

        result = await self._run("update", job_id, operation)
        if result.success:
            result.message = "Job updated successfully"
            await self._refresh_quietly("update")
        return result

    @track_action_duration("create")
    async def create(self, draft: JobDraft) -> ActionResult[Job]:
        async def operation() -> Job:
            return await self.create_job.execute(draft)

        result = await self._run("create", uuid4().hex, operation)
        if result.success:
            result.message = "Job created successfully"
            await self._refresh_quietly("create")
        return result

    # Views

    async def board_view(
        self,
        sort_by: Optional[str] = None,
        descending: bool = False,
        skill: str = ALL,
        search: Optional[str] = None,
    ) -> BoardView:
        await self.board.ensure_loaded()
        return self.board.view(
            today=self.clock(),
            sort_by=sort_by,
            descending=descending,
            skill=skill,
            search=search,
            in_progress_job_ids=self.guard.in_progress_job_ids(),
        )

    async def urgent_jobs(self) -> List[Job]:
        await self.board.ensure_loaded()
        return urgent_jobs(self.board.jobs, self.clock())

    async def available_job_list(
        self, filters: Optional[AvailableJobFilters] = None
    ) -> List[Job]:
        await self.available_jobs.ensure_loaded()
        return self.available_jobs.view(filters)

    async def eligible_technicians(self, job_id: Optional[str] = None) -> List[Technician]:
        """
        Technicians selectable for a job.

        Without a job this is the creation list (Available only); with a job
        it is the edit list, which also keeps Busy technicians and whoever
        currently holds the job.
        """
        await self.board.ensure_loaded()
        if not job_id:
            return self.capacity_model.eligible_for_assignment(self.board.technicians)

        job = self.board.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return self.capacity_model.eligible_for_edit(
            self.board.technicians, job.technician_id
        )

    def new_completion_form(self, job: Job) -> CompletionForm:
        return CompletionForm(
            job.id, due_date=job.due_day, accepted_content_type=self.report_content_type
        )
