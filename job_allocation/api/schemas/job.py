"""
Job-related API schemas.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from job_allocation.application.interfaces.gateways import UNCHANGED, JobDraft, JobUpdate
from job_allocation.application.services.allocation_board import BoardView
from job_allocation.domain.entities.job import Job
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType

from .common import BaseResponse
from .technician import TechnicianResponse


class PropertySchema(BaseModel):
    """Property reference schema."""

    id: str
    address: str = ""
    agency_name: Optional[str] = None


class TechnicianRefSchema(BaseModel):
    """Assigned technician reference schema."""

    id: str
    display_name: str


class JobResponse(BaseModel):
    """Job response schema."""

    id: str
    job_id: str
    job_type: JobType
    status: JobStatus = Field(..., description="Stored status")
    display_status: JobStatus = Field(
        ..., description="Stored status, or Overdue for open jobs past due"
    )
    priority: Optional[JobPriority] = None
    due_date: Optional[datetime] = None
    due_label: str
    property: Optional[PropertySchema] = None
    technician: Optional[TechnicianRefSchema] = None
    description: Optional[str] = None
    has_invoice: bool = False
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, job: Job, today: date) -> "JobResponse":
        return cls(
            id=job.id,
            job_id=job.job_id,
            job_type=job.job_type,
            status=job.status,
            display_status=job.display_status(today),
            priority=job.priority,
            due_date=job.due_date,
            due_label=job.due_label(today),
            property=PropertySchema(**job.property_ref.to_dict())
            if job.property_ref
            else None,
            technician=TechnicianRefSchema(**job.technician.to_dict())
            if job.technician
            else None,
            description=job.description,
            has_invoice=job.has_invoice,
            created_at=job.created_at,
            completed_at=job.completed_at,
        )


class JobCreateRequest(BaseModel):
    """Job creation request schema."""

    property_id: str = Field(..., min_length=1)
    job_type: JobType
    due_date: datetime
    technician_id: Optional[str] = None
    priority: JobPriority = JobPriority.MEDIUM
    description: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = None

    def to_draft(self) -> JobDraft:
        return JobDraft(
            property_id=self.property_id,
            job_type=self.job_type,
            due_date=self.due_date,
            technician_id=self.technician_id or None,
            priority=self.priority,
            description=self.description,
            notes=self.notes,
        )


class JobUpdateRequest(BaseModel):
    """
    Partial job edit.

    Omitting ``technician_id`` leaves the assignment alone; sending it as
    null clears it.
    """

    job_type: Optional[JobType] = None
    due_date: Optional[datetime] = None
    technician_id: Optional[str] = None
    status: Optional[JobStatus] = None
    priority: Optional[JobPriority] = None
    description: Optional[str] = Field(None, max_length=2000)

    def to_update(self) -> JobUpdate:
        technician_id = UNCHANGED
        if "technician_id" in self.model_fields_set:
            technician_id = self.technician_id or None

        return JobUpdate(
            job_type=self.job_type,
            due_date=self.due_date,
            technician_id=technician_id,
            status=self.status,
            priority=self.priority,
            description=self.description,
        )


class AssignJobRequest(BaseModel):
    """Dispatcher assignment request."""

    technician_id: str = Field(..., min_length=1)


class InvoiceItemSchema(BaseModel):
    """Submitted invoice line; the amount is always recomputed."""

    model_config = {"allow_inf_nan": False}

    name: str = ""
    quantity: float = 0
    rate: float = 0


class InvoiceSubmission(BaseModel):
    """Invoice part of a completion submission."""

    description: str = ""
    items: List[InvoiceItemSchema] = Field(default_factory=list)
    tax_percentage: float = Field(0, alias="taxPercentage")
    notes: str = ""

    model_config = {"populate_by_name": True, "allow_inf_nan": False}

    @field_validator("description", "notes", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    def to_form_data(self) -> Dict:
        return {
            "description": self.description,
            "items": [item.model_dump() for item in self.items],
            "taxPercentage": self.tax_percentage,
            "notes": self.notes,
        }


class InvoiceTotals(BaseModel):
    subtotal: str
    tax: str
    total: str


class AssignmentResultResponse(BaseResponse):
    """Combined job and technician returned by assign and claim."""

    job: JobResponse
    technician: TechnicianResponse


class JobActionResponse(BaseResponse):
    """Single job returned by edit and create."""

    job: JobResponse


class CompletionResultResponse(BaseResponse):
    """Completed job with the invoice totals that were submitted."""

    job: JobResponse
    invoice: Optional[InvoiceTotals] = None


class BoardStatisticsSchema(BaseModel):
    pending_jobs: int
    available_technicians: int
    technicians_at_capacity: int
    status_counts: Dict[str, int]


class BoardResponse(BaseModel):
    """Sorted and filtered allocation board."""

    pending_jobs: List[JobResponse]
    technicians: List[TechnicianResponse]
    statistics: BoardStatisticsSchema
    in_progress_job_ids: List[str]

    @classmethod
    def from_view(cls, view: BoardView, today: date) -> "BoardResponse":
        return cls(
            pending_jobs=[JobResponse.from_entity(job, today) for job in view.pending_jobs],
            technicians=[TechnicianResponse.from_entity(t) for t in view.technicians],
            statistics=BoardStatisticsSchema(**view.statistics.to_dict()),
            in_progress_job_ids=sorted(view.in_progress_job_ids),
        )


class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int
