"""
Unit tests for the allocation use cases with mocked gateways.
"""

from dataclasses import replace
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from job_allocation.application.interfaces.gateways import (
    AssignmentResponse,
    CompletionRequest,
    JobDraft,
    JobUpdate,
    ReportFile,
)
from job_allocation.application.use_cases.assign_job import AssignJobUseCase
from job_allocation.application.use_cases.claim_job import ClaimJobUseCase
from job_allocation.application.use_cases.complete_job import CompleteJobUseCase
from job_allocation.application.use_cases.create_job import CreateJobUseCase
from job_allocation.application.use_cases.update_job import UpdateJobUseCase
from job_allocation.domain.entities.job import Job
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.exceptions.allocation_error import (
    CompletionNotDueError,
    InvalidTransitionError,
    JobNotClaimableError,
    JobNotFoundError,
    TechnicianNotFoundError,
)
from job_allocation.domain.exceptions.gateway_error import GatewayAPIError
from job_allocation.domain.exceptions.validation_error import (
    RequiredFieldError,
    ValidationError,
)
from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType

TODAY = date(2024, 6, 10)


@pytest.fixture
def technician():
    return Technician(id="T1", name="Alice Smith", current_jobs=2, max_jobs=5)


@pytest.fixture
def pending_job():
    return Job(
        id="J1",
        job_id="000001",
        job_type=JobType.GAS,
        due_date=datetime(2024, 6, 10, tzinfo=timezone.utc),
    )


@pytest.fixture
def scheduled_job(pending_job, technician):
    return replace(pending_job, status=JobStatus.SCHEDULED, technician=technician.to_ref())


@pytest.fixture
def report():
    return ReportFile(filename="report.pdf", content=b"%PDF", content_type="application/pdf")


class TestAssignJobUseCase:
    @pytest.fixture
    def use_case(self, mock_job_gateway, mock_technician_gateway, state_machine, capacity_model):
        return AssignJobUseCase(
            mock_job_gateway, mock_technician_gateway, state_machine, capacity_model
        )

    @pytest.mark.asyncio
    async def test_assign_success(
        self, use_case, mock_job_gateway, mock_technician_gateway, pending_job, scheduled_job, technician
    ):
        mock_job_gateway.get_job.return_value = pending_job
        mock_technician_gateway.get_technician.return_value = technician
        response = AssignmentResponse(
            job=scheduled_job, technician=replace(technician, current_jobs=3)
        )
        mock_job_gateway.assign_job.return_value = response

        result = await use_case.execute("J1", "T1")

        assert result is response
        mock_job_gateway.assign_job.assert_called_once_with("J1", "T1")

    @pytest.mark.asyncio
    async def test_assign_at_capacity_still_calls_service(
        self, use_case, mock_job_gateway, mock_technician_gateway, pending_job, scheduled_job, technician
    ):
        full = replace(technician, current_jobs=5)
        mock_job_gateway.get_job.return_value = pending_job
        mock_technician_gateway.get_technician.return_value = full
        mock_job_gateway.assign_job.return_value = AssignmentResponse(
            job=scheduled_job, technician=replace(full, current_jobs=6)
        )

        result = await use_case.execute("J1", "T1")

        assert result.technician.current_jobs == 6
        mock_job_gateway.assign_job.assert_called_once()

    @pytest.mark.asyncio
    async def test_assign_job_not_found(self, use_case, mock_job_gateway):
        mock_job_gateway.get_job.return_value = None

        with pytest.raises(JobNotFoundError):
            await use_case.execute("J1", "T1")

        mock_job_gateway.assign_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_assign_technician_not_found(
        self, use_case, mock_job_gateway, mock_technician_gateway, pending_job
    ):
        mock_job_gateway.get_job.return_value = pending_job
        mock_technician_gateway.get_technician.return_value = None

        with pytest.raises(TechnicianNotFoundError):
            await use_case.execute("J1", "T1")

    @pytest.mark.asyncio
    async def test_assign_already_scheduled(
        self, use_case, mock_job_gateway, mock_technician_gateway, scheduled_job, technician
    ):
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_technician_gateway.get_technician.return_value = technician

        with pytest.raises(JobNotClaimableError):
            await use_case.execute("J1", "T1")

        mock_job_gateway.assign_job.assert_not_called()


class TestClaimJobUseCase:
    @pytest.fixture
    def use_case(self, mock_job_gateway, mock_technician_gateway, state_machine):
        return ClaimJobUseCase(mock_job_gateway, mock_technician_gateway, state_machine)

    @pytest.mark.asyncio
    async def test_claim_precondition_failure_becomes_not_claimable(
        self, use_case, mock_job_gateway, mock_technician_gateway, pending_job, technician
    ):
        mock_job_gateway.get_job.return_value = pending_job
        mock_technician_gateway.get_technician.return_value = technician
        mock_job_gateway.claim_job.side_effect = GatewayAPIError(409, "Job is no longer available")

        with pytest.raises(JobNotClaimableError):
            await use_case.execute("J1", "T1")

    @pytest.mark.asyncio
    async def test_claim_server_error_propagates(
        self, use_case, mock_job_gateway, mock_technician_gateway, pending_job, technician
    ):
        mock_job_gateway.get_job.return_value = pending_job
        mock_technician_gateway.get_technician.return_value = technician
        mock_job_gateway.claim_job.side_effect = GatewayAPIError(500, "boom")

        with pytest.raises(GatewayAPIError):
            await use_case.execute("J1", "T1")


class TestCompleteJobUseCase:
    @pytest.fixture
    def use_case(self, mock_job_gateway, state_machine):
        return CompleteJobUseCase(mock_job_gateway, state_machine)

    @pytest.mark.asyncio
    async def test_complete_success(self, use_case, mock_job_gateway, scheduled_job, report):
        completed = replace(scheduled_job, status=JobStatus.COMPLETED)
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_job_gateway.complete_job.return_value = completed
        request = CompletionRequest(report=report)

        result = await use_case.execute("J1", request, "T1", today=TODAY)

        assert result.status == JobStatus.COMPLETED
        mock_job_gateway.complete_job.assert_called_once_with("J1", request)

    @pytest.mark.asyncio
    async def test_complete_before_due_date(self, use_case, mock_job_gateway, scheduled_job, report):
        mock_job_gateway.get_job.return_value = scheduled_job

        with pytest.raises(CompletionNotDueError):
            await use_case.execute(
                "J1", CompletionRequest(report=report), today=date(2024, 6, 9)
            )

        mock_job_gateway.complete_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_complete_by_other_technician(self, use_case, mock_job_gateway, scheduled_job, report):
        mock_job_gateway.get_job.return_value = scheduled_job

        with pytest.raises(InvalidTransitionError):
            await use_case.execute("J1", CompletionRequest(report=report), "T2", today=TODAY)


class TestUpdateJobUseCase:
    @pytest.fixture
    def use_case(self, mock_job_gateway, mock_technician_gateway, state_machine, capacity_model):
        return UpdateJobUseCase(
            mock_job_gateway, mock_technician_gateway, state_machine, capacity_model
        )

    @pytest.mark.asyncio
    async def test_demotion_sent_as_single_update_with_null_technician(
        self, use_case, mock_job_gateway, scheduled_job, pending_job
    ):
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_job_gateway.update_job.return_value = pending_job

        await use_case.execute("J1", JobUpdate(status=JobStatus.PENDING))

        mock_job_gateway.update_job_status.assert_not_called()
        sent = mock_job_gateway.update_job.call_args.args[1]
        assert sent.status == JobStatus.PENDING
        assert sent.changes_technician is True
        assert sent.technician_id is None

    @pytest.mark.asyncio
    async def test_cancellation_is_planned_as_demotion(
        self, use_case, mock_job_gateway, state_machine, scheduled_job, pending_job
    ):
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_job_gateway.update_job.return_value = pending_job

        with patch.object(
            state_machine, "plan_demotion", wraps=state_machine.plan_demotion
        ) as plan_demotion:
            await use_case.execute("J1", JobUpdate(status=JobStatus.CANCELLED))

        plan_demotion.assert_called_once_with(scheduled_job, JobStatus.CANCELLED)
        assert mock_job_gateway.update_job.call_args.args[1].technician_id is None

    @pytest.mark.asyncio
    async def test_plain_status_change_uses_status_endpoint(
        self, use_case, mock_job_gateway, scheduled_job
    ):
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_job_gateway.update_job_status.return_value = replace(
            scheduled_job, status=JobStatus.OVERDUE
        )

        result = await use_case.execute("J1", JobUpdate(status=JobStatus.OVERDUE))

        assert result.status == JobStatus.OVERDUE
        mock_job_gateway.update_job_status.assert_called_once_with("J1", JobStatus.OVERDUE)
        mock_job_gateway.update_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_unavailable_technician_rejected(
        self, use_case, mock_job_gateway, mock_technician_gateway, scheduled_job
    ):
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_technician_gateway.get_technician.return_value = Technician(
            id="T9", name="Eve", availability=Availability.UNAVAILABLE
        )

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute("J1", JobUpdate(technician_id="T9"))

        assert exc_info.value.field_errors == {
            "technician": "Please select an available technician"
        }

    @pytest.mark.asyncio
    async def test_unknown_technician(self, use_case, mock_job_gateway, mock_technician_gateway, scheduled_job):
        mock_job_gateway.get_job.return_value = scheduled_job
        mock_technician_gateway.get_technician.return_value = None

        with pytest.raises(TechnicianNotFoundError):
            await use_case.execute("J1", JobUpdate(technician_id="T9"))


class TestCreateJobUseCase:
    @pytest.fixture
    def use_case(self, mock_job_gateway, mock_technician_gateway, capacity_model):
        return CreateJobUseCase(mock_job_gateway, mock_technician_gateway, capacity_model)

    @pytest.fixture
    def draft(self):
        return JobDraft(
            property_id="P1",
            job_type=JobType.GAS,
            due_date=datetime(2024, 7, 1, tzinfo=timezone.utc),
        )

    @pytest.mark.asyncio
    async def test_create_without_technician(self, use_case, mock_job_gateway, draft, pending_job):
        mock_job_gateway.create_job.return_value = pending_job

        result = await use_case.execute(draft)

        assert result is pending_job
        mock_job_gateway.create_job.assert_called_once_with(draft)

    @pytest.mark.asyncio
    async def test_create_requires_property(self, use_case, mock_job_gateway, draft):
        with pytest.raises(RequiredFieldError) as exc_info:
            await use_case.execute(replace(draft, property_id=" "))

        assert exc_info.value.field_name == "property"
        mock_job_gateway.create_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_requires_due_date(self, use_case, draft):
        with pytest.raises(RequiredFieldError):
            await use_case.execute(replace(draft, due_date=None))

    @pytest.mark.asyncio
    async def test_create_rejects_on_leave_technician(
        self, use_case, mock_technician_gateway, draft
    ):
        mock_technician_gateway.get_technician.return_value = Technician(
            id="T4", name="Dan", availability=Availability.ON_LEAVE
        )

        with pytest.raises(ValidationError):
            await use_case.execute(replace(draft, technician_id="T4"))
