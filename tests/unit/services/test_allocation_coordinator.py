"""
Unit tests for AllocationCoordinator against the in-memory job service.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from job_allocation.application.interfaces.gateways import JobDraft, JobUpdate
from job_allocation.application.results import ErrorType
from job_allocation.application.services.allocation_coordinator import (
    AllocationCoordinator,
)
from job_allocation.application.services.completion_form import CompletionStage
from job_allocation.domain.exceptions.allocation_error import JobNotFoundError
from job_allocation.domain.exceptions.gateway_error import (
    GatewayAPIError,
    GatewayUnavailableError,
)
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType
from job_allocation.domain.value_objects.references import TechnicianRef


def invoice_form(coordinator, job_id, report):
    form = coordinator.new_completion_form(coordinator.board.get_job(job_id))
    form.attach_report(report)
    form.toggle_invoice(True)
    form.description = "Replaced smoke alarm"
    form.update_item(form.items[0].id, name="Part", quantity=2, rate=50)
    form.set_tax_percentage(10)
    return form


class TestAssign:
    @pytest.mark.asyncio
    async def test_happy_path_assignment(self, coordinator, gateway):
        result = await coordinator.assign("J1", "T1")

        assert result.success is True
        assert result.message == "Job assigned to Alice Smith"
        assert result.data.job.status == JobStatus.SCHEDULED
        assert result.data.job.technician_id == "T1"
        assert result.data.technician.current_jobs == 3

        assert gateway.technicians["T1"].current_jobs == 3
        assert coordinator.board.get_job("J1").technician_id == "T1"
        assert coordinator.board.get_technician("T1").current_jobs == 3

    @pytest.mark.asyncio
    async def test_board_uses_combined_response_without_refetch(self, gateway, today):
        coordinator = AllocationCoordinator(
            gateway, gateway, refresh_after_assign=False, clock=lambda: today
        )
        await coordinator.refresh()

        with patch.object(coordinator.board, "refresh", AsyncMock()) as refresh:
            result = await coordinator.assign("J1", "T1")

        assert result.success is True
        refresh.assert_not_called()
        assert coordinator.board.get_job("J1").status == JobStatus.SCHEDULED
        assert coordinator.board.get_technician("T1").current_jobs == 3

    @pytest.mark.asyncio
    async def test_assignment_at_capacity_is_allowed(self, coordinator, gateway):
        """Capacity is a soft limit: a full technician can still be booked."""
        result = await coordinator.assign("J5", "T2")

        assert result.success is True
        assert gateway.technicians["T2"].current_jobs == 6
        assert gateway.jobs["J5"].technician_id == "T2"

    @pytest.mark.asyncio
    async def test_missing_technician_fails_without_network_call(self, coordinator, gateway):
        with patch.object(gateway, "get_job", AsyncMock()) as get_job:
            result = await coordinator.assign("J1", "")

        assert result.success is False
        assert result.error_type == ErrorType.VALIDATION
        assert "technician" in result.field_errors
        get_job.assert_not_called()
        assert gateway.jobs["J1"].status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_technician_fails_validation(self, coordinator, gateway):
        with patch.object(gateway, "get_job", AsyncMock()) as get_job:
            result = await coordinator.assign("J1", "T99")

        assert result.error_type == ErrorType.VALIDATION
        assert result.field_errors == {"technician": "Please select a valid technician"}
        get_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_job_is_not_found(self, coordinator):
        result = await coordinator.assign("J99", "T1")

        assert result.error_type == ErrorType.NOT_FOUND
        assert result.error_type.requires_refresh is True

    @pytest.mark.asyncio
    async def test_stale_board_is_refreshed_after_rejection(self, coordinator, gateway):
        # Another dispatcher assigned J1 after our snapshot was taken
        gateway.jobs["J1"].assign_to(TechnicianRef(id="T3", display_name="Cara Lee"))
        assert coordinator.board.get_job("J1").status == JobStatus.PENDING

        result = await coordinator.assign("J1", "T1")

        assert result.success is False
        assert result.error_type == ErrorType.PRECONDITION
        assert gateway.technicians["T1"].current_jobs == 2
        assert coordinator.board.get_job("J1").technician_id == "T3"

    @pytest.mark.asyncio
    async def test_transport_failure_is_transient(self, coordinator, gateway):
        with patch.object(
            gateway,
            "assign_job",
            AsyncMock(side_effect=GatewayUnavailableError("connection refused")),
        ):
            result = await coordinator.assign("J1", "T1")

        assert result.success is False
        assert result.error_type == ErrorType.TRANSIENT
        assert result.error_type.is_retryable is True
        assert gateway.jobs["J1"].status == JobStatus.PENDING
        assert coordinator.board.get_job("J1").status == JobStatus.PENDING


class TestClaim:
    @pytest.mark.asyncio
    async def test_claim_removes_job_from_available_list(self, coordinator, gateway):
        await coordinator.available_job_list()

        result = await coordinator.claim("J1", "T3")

        assert result.success is True
        assert result.message == "Job claimed successfully"
        assert gateway.technicians["T3"].current_jobs == 2
        assert [job.id for job in await coordinator.available_job_list()] == ["J5"]

    @pytest.mark.asyncio
    async def test_second_claim_fails_without_side_effects(self, coordinator, gateway):
        first = await coordinator.claim("J1", "T1")
        second = await coordinator.claim("J1", "T3")

        assert first.success is True
        assert second.success is False
        assert second.error_type == ErrorType.PRECONDITION
        assert gateway.jobs["J1"].technician_id == "T1"
        assert gateway.technicians["T1"].current_jobs == 3
        assert gateway.technicians["T3"].current_jobs == 1

    @pytest.mark.asyncio
    async def test_concurrent_claims_only_one_succeeds(self, coordinator, gateway):
        results = await asyncio.gather(
            coordinator.claim("J1", "T1"), coordinator.claim("J1", "T3")
        )

        assert [r.success for r in results].count(True) == 1
        total = gateway.technicians["T1"].current_jobs + gateway.technicians["T3"].current_jobs
        assert total == 2 + 1 + 1

    @pytest.mark.asyncio
    async def test_claim_race_lost_at_job_service(self, coordinator, gateway):
        with patch.object(
            gateway,
            "claim_job",
            AsyncMock(side_effect=GatewayAPIError(409, "Job is no longer available")),
        ):
            result = await coordinator.claim("J1", "T1")

        assert result.error_type == ErrorType.PRECONDITION
        assert "no longer available" in result.message

    @pytest.mark.asyncio
    async def test_duplicate_in_flight_claim_refused(self, coordinator):
        async with coordinator.guard.hold("claim", "J1"):
            result = await coordinator.claim("J1", "T1")

            view = await coordinator.board_view()
            assert view.in_progress_job_ids == {"J1"}

        assert result.success is False
        assert result.error_type == ErrorType.PRECONDITION
        assert "already in progress" in result.message


class TestComplete:
    @pytest.mark.asyncio
    async def test_completion_with_invoice(self, coordinator, gateway, pdf_report):
        form = invoice_form(coordinator, "J2", pdf_report)
        assert form.totals() == {"subtotal": "100.00", "tax": "10.00", "total": "110.00"}

        result = await coordinator.complete("J2", form, actor_technician_id="T2")

        assert result.success is True
        assert result.data.status == JobStatus.COMPLETED
        assert result.data.has_invoice is True
        assert result.data.completed_at is not None

        stored = gateway.invoices[gateway.jobs["J2"].invoice_id]
        assert stored.total_cost == 110
        assert gateway.technicians["T2"].current_jobs == 4
        assert coordinator.board.get_job("J2").status == JobStatus.COMPLETED
        assert form.stage == CompletionStage.IDLE

    @pytest.mark.asyncio
    async def test_completion_without_invoice(self, coordinator, gateway, pdf_report):
        form = coordinator.new_completion_form(coordinator.board.get_job("J2"))
        form.attach_report(pdf_report)

        result = await coordinator.complete("J2", form)

        assert result.success is True
        assert gateway.jobs["J2"].has_invoice is False
        assert gateway.reports["J2"] == "report.pdf"

    @pytest.mark.asyncio
    async def test_early_completion_rejected(self, coordinator, gateway, pdf_report):
        form = invoice_form(coordinator, "J4", pdf_report)

        result = await coordinator.complete("J4", form)

        assert result.success is False
        assert result.error_type == ErrorType.PRECONDITION
        assert "before its due date" in result.message
        assert gateway.jobs["J4"].status == JobStatus.SCHEDULED
        assert gateway.technicians["T1"].current_jobs == 2
        # The form keeps its data for a retry
        assert form.report == pdf_report
        assert form.description == "Replaced smoke alarm"
        assert form.loading is False

    @pytest.mark.asyncio
    async def test_invalid_form_never_reaches_job_service(self, coordinator, gateway):
        form = coordinator.new_completion_form(coordinator.board.get_job("J2"))

        with patch.object(gateway, "complete_job", AsyncMock()) as complete_job:
            result = await coordinator.complete("J2", form)

        assert result.error_type == ErrorType.VALIDATION
        assert result.field_errors == {"reportFile": "Please upload a job report PDF"}
        complete_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_assigned_technician_can_complete(self, coordinator, gateway, pdf_report):
        form = coordinator.new_completion_form(coordinator.board.get_job("J2"))
        form.attach_report(pdf_report)

        result = await coordinator.complete("J2", form, actor_technician_id="T1")

        assert result.error_type == ErrorType.PRECONDITION
        assert gateway.jobs["J2"].status == JobStatus.SCHEDULED


class TestUpdateAndCreate:
    @pytest.mark.asyncio
    async def test_demotion_releases_technician(self, coordinator, gateway):
        result = await coordinator.update("J3", JobUpdate(status=JobStatus.PENDING))

        assert result.success is True
        assert result.data.technician is None
        assert result.data.status == JobStatus.PENDING
        assert gateway.technicians["T3"].current_jobs == 0
        assert coordinator.board.get_technician("T3").current_jobs == 0

    @pytest.mark.asyncio
    async def test_repeated_demotion_does_not_double_decrement(self, coordinator, gateway):
        await coordinator.update("J3", JobUpdate(status=JobStatus.CANCELLED))
        await coordinator.update("J3", JobUpdate(status=JobStatus.CANCELLED))

        assert gateway.technicians["T3"].current_jobs == 0

    @pytest.mark.asyncio
    async def test_reassign_through_edit(self, coordinator, gateway):
        result = await coordinator.update("J3", JobUpdate(technician_id="T2"))

        assert result.success is True
        assert gateway.jobs["J3"].technician_id == "T2"
        assert gateway.technicians["T3"].current_jobs == 0
        assert gateway.technicians["T2"].current_jobs == 6

    @pytest.mark.asyncio
    async def test_edit_with_naive_due_date_keeps_views_sortable(self, coordinator, gateway):
        result = await coordinator.update(
            "J5", JobUpdate(due_date=datetime(2024, 6, 11), priority=JobPriority.URGENT)
        )

        assert result.success is True
        assert gateway.jobs["J5"].due_date.tzinfo == timezone.utc

        view = await coordinator.board_view(sort_by="due_date")
        urgent = await coordinator.urgent_jobs()

        assert [job.id for job in view.pending_jobs] == ["J5", "J1"]
        assert [job.id for job in urgent] == ["J5", "J1"]

    @pytest.mark.asyncio
    async def test_edit_rejects_technician_on_leave(self, coordinator):
        result = await coordinator.update("J3", JobUpdate(technician_id="T4"))

        assert result.error_type == ErrorType.VALIDATION
        assert "technician" in result.field_errors

    @pytest.mark.asyncio
    async def test_create_with_technician_starts_scheduled(self, coordinator, gateway):
        draft = JobDraft(
            property_id="P1",
            job_type=JobType.SMOKE,
            due_date=datetime(2024, 7, 1, tzinfo=timezone.utc),
            technician_id="T1",
            priority=JobPriority.HIGH,
        )

        result = await coordinator.create(draft)

        assert result.success is True
        assert result.data.status == JobStatus.SCHEDULED
        assert result.data.property_ref.address == "12 High St, Springfield"
        assert gateway.technicians["T1"].current_jobs == 3
        assert coordinator.board.get_job(result.data.id) is not None

    @pytest.mark.asyncio
    async def test_create_rejects_busy_technician(self, coordinator):
        draft = JobDraft(
            property_id="P1",
            job_type=JobType.GAS,
            due_date=datetime(2024, 7, 1, tzinfo=timezone.utc),
            technician_id="T2",
        )

        result = await coordinator.create(draft)

        assert result.error_type == ErrorType.VALIDATION
        assert "assignedTechnician" in result.field_errors

    @pytest.mark.asyncio
    async def test_concurrent_creates_for_same_property(self, coordinator, gateway):
        create_job = gateway.create_job

        async def slow_create(draft):
            await asyncio.sleep(0)
            return await create_job(draft)

        drafts = [
            JobDraft(
                property_id="P1",
                job_type=job_type,
                due_date=datetime(2024, 7, 1, tzinfo=timezone.utc),
            )
            for job_type in (JobType.GAS, JobType.ELECTRICAL)
        ]

        with patch.object(gateway, "create_job", AsyncMock(side_effect=slow_create)):
            results = await asyncio.gather(*(coordinator.create(d) for d in drafts))

        assert [r.success for r in results] == [True, True]
        assert {r.data.job_type for r in results} == {JobType.GAS, JobType.ELECTRICAL}


class TestViews:
    @pytest.mark.asyncio
    async def test_eligible_technicians(self, coordinator):
        creation = await coordinator.eligible_technicians()
        edit = await coordinator.eligible_technicians("J3")

        assert sorted(t.id for t in creation) == ["T1", "T3"]
        assert sorted(t.id for t in edit) == ["T1", "T2", "T3"]

    @pytest.mark.asyncio
    async def test_eligible_technicians_for_unknown_job(self, coordinator):
        with pytest.raises(JobNotFoundError):
            await coordinator.eligible_technicians("J99")

    @pytest.mark.asyncio
    async def test_urgent_jobs(self, coordinator):
        jobs = await coordinator.urgent_jobs()

        assert [job.id for job in jobs] == ["J1"]

    @pytest.mark.asyncio
    async def test_board_view_sorted_by_due_date(self, coordinator):
        view = await coordinator.board_view(sort_by="due_date")

        assert [job.id for job in view.pending_jobs] == ["J1", "J5"]
        assert view.statistics.pending_jobs == 2
