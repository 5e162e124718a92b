"""Job allocation action endpoints."""

import json
from datetime import date
from typing import Optional

import structlog
from fastapi import APIRouter, File, Form, Header, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from job_allocation.api.dependencies import ActingTechnicianDep, CoordinatorDep
from job_allocation.api.schemas.common import error_response
from job_allocation.api.schemas.job import (
    AssignJobRequest,
    AssignmentResultResponse,
    CompletionResultResponse,
    InvoiceSubmission,
    InvoiceTotals,
    JobActionResponse,
    JobCreateRequest,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
)
from job_allocation.api.schemas.technician import TechnicianResponse
from job_allocation.application.interfaces.gateways import ReportFile
from job_allocation.application.results import ActionResult
from job_allocation.application.services.completion_form import CompletionForm
from job_allocation.application.services.job_presentation import (
    ALL,
    AvailableJobFilters,
)
from job_allocation.domain.exceptions.validation_error import InvalidFormatError

logger = structlog.get_logger()
router = APIRouter(prefix="/jobs", tags=["jobs"])


def _assignment_response(result: ActionResult, today: date) -> AssignmentResultResponse:
    return AssignmentResultResponse(
        message=result.message,
        job=JobResponse.from_entity(result.data.job, today),
        technician=TechnicianResponse.from_entity(result.data.technician),
    )


@router.post("/", response_model=JobActionResponse, status_code=status.HTTP_201_CREATED)
async def create_job(job_data: JobCreateRequest, coordinator: CoordinatorDep):
    """Create a job, optionally pre-assigned to an available technician."""
    result = await coordinator.create(job_data.to_draft())
    if not result.success:
        return error_response(result)

    return JobActionResponse(
        message=result.message,
        job=JobResponse.from_entity(result.data, coordinator.clock()),
    )


@router.get("/urgent", response_model=JobListResponse)
async def list_urgent_jobs(coordinator: CoordinatorDep):
    """Urgent-priority and overdue jobs, soonest due first."""
    today = coordinator.clock()
    jobs = await coordinator.urgent_jobs()
    return JobListResponse(
        jobs=[JobResponse.from_entity(job, today) for job in jobs], total=len(jobs)
    )


@router.get("/available", response_model=JobListResponse)
async def list_available_jobs(
    coordinator: CoordinatorDep,
    search: str = "",
    created_date: str = "",
    priority: str = ALL,
    job_type: str = ALL,
    job_status: str = Query(ALL, alias="status"),
):
    """Claimable jobs for technicians to browse."""
    today = coordinator.clock()
    jobs = await coordinator.available_job_list(
        AvailableJobFilters(
            search=search,
            created_date=created_date,
            priority=priority,
            job_type=job_type,
            status=job_status,
        )
    )
    return JobListResponse(
        jobs=[JobResponse.from_entity(job, today) for job in jobs], total=len(jobs)
    )


@router.post("/{job_id}/assign", response_model=AssignmentResultResponse)
async def assign_job(
    job_id: str, request: AssignJobRequest, coordinator: CoordinatorDep
):
    """Dispatcher assignment of a pending job."""
    result = await coordinator.assign(job_id, request.technician_id)
    if not result.success:
        return error_response(result)
    return _assignment_response(result, coordinator.clock())


@router.post("/{job_id}/claim", response_model=AssignmentResultResponse)
async def claim_job(
    job_id: str, technician_id: ActingTechnicianDep, coordinator: CoordinatorDep
):
    """Technician self-claim of an unassigned job."""
    result = await coordinator.claim(job_id, technician_id)
    if not result.success:
        return error_response(result)
    return _assignment_response(result, coordinator.clock())


@router.put("/{job_id}", response_model=JobActionResponse)
async def update_job(
    job_id: str, job_data: JobUpdateRequest, coordinator: CoordinatorDep
):
    """Direct edit; demotion to Pending or Cancelled releases the technician."""
    result = await coordinator.update(job_id, job_data.to_update())
    if not result.success:
        return error_response(result)

    return JobActionResponse(
        message=result.message,
        job=JobResponse.from_entity(result.data, coordinator.clock()),
    )


@router.post("/{job_id}/complete", response_model=CompletionResultResponse)
async def complete_job(
    job_id: str,
    coordinator: CoordinatorDep,
    report: Optional[UploadFile] = File(None),
    invoice: Optional[str] = Form(None),
    x_technician_id: Optional[str] = Header(None),
):
    """Complete a job with its report and optional invoice (JSON string)."""
    invoice_data = None
    if invoice:
        try:
            invoice_data = InvoiceSubmission.model_validate(
                json.loads(invoice)
            ).to_form_data()
        except (ValueError, PydanticValidationError) as e:
            logger.warning("Malformed invoice payload", job_id=job_id, error=str(e))
            return error_response(
                ActionResult.from_exception(
                    InvalidFormatError("invoice", "an invoice JSON object")
                )
            )

    report_file = None
    if report is not None and report.filename:
        report_file = ReportFile(
            filename=report.filename,
            content=await report.read(),
            content_type=report.content_type or "",
        )

    known_job = coordinator.board.get_job(job_id)
    form = CompletionForm.from_submission(
        job_id,
        report_file,
        invoice_data,
        due_date=known_job.due_day if known_job else None,
        accepted_content_type=coordinator.report_content_type,
    )
    # Captured before submission; a successful completion resets the form
    totals = form.totals() if form.invoice_enabled and form.validate() else None

    result = await coordinator.complete(job_id, form, actor_technician_id=x_technician_id)
    if not result.success:
        return error_response(result)

    return CompletionResultResponse(
        message=result.message,
        job=JobResponse.from_entity(result.data, coordinator.clock()),
        invoice=InvoiceTotals(**totals) if totals else None,
    )
