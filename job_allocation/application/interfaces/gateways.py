"""
Gateway interfaces for the external compliance API (dependency inversion).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from job_allocation.domain.entities.invoice import Invoice
from job_allocation.domain.entities.job import Job, as_utc
from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType

# Distinguishes "leave technician unchanged" from "clear technician" (None).
UNCHANGED: Any = object()


@dataclass
class JobFilters:
    """Server-side job list filters."""

    status: Optional[str] = None
    job_type: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    assigned_technician: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    page: int = 1
    limit: int = 100
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    def to_query(self) -> Dict[str, str]:
        """Render non-empty filters as API query parameters."""
        params = {
            "status": self.status,
            "jobType": self.job_type,
            "priority": self.priority,
            "search": self.search,
            "assignedTechnician": self.assigned_technician,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "page": self.page,
            "limit": self.limit,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }
        return {k: str(v) for k, v in params.items() if v not in (None, "")}


@dataclass
class Pagination:
    """Pagination metadata returned with list responses."""

    current_page: int = 1
    total_pages: int = 1
    total_items: int = 0
    items_per_page: int = 0
    has_next_page: bool = False
    has_prev_page: bool = False


@dataclass
class JobPage:
    """A page of jobs plus statistics."""

    jobs: List[Job]
    pagination: Pagination = field(default_factory=Pagination)
    status_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class TechnicianFilters:
    """Server-side technician list filters."""

    availability: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None
    limit: int = 100

    def to_query(self) -> Dict[str, str]:
        params = {
            "availabilityStatus": self.availability,
            "status": self.status,
            "search": self.search,
            "limit": self.limit,
        }
        return {k: str(v) for k, v in params.items() if v not in (None, "")}


@dataclass
class JobDraft:
    """Fields for creating a job."""

    property_id: str
    job_type: JobType
    due_date: datetime
    technician_id: Optional[str] = None
    priority: JobPriority = JobPriority.MEDIUM
    description: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        self.due_date = as_utc(self.due_date)


@dataclass
class JobUpdate:
    """Partial job update; ``technician_id`` None clears the assignment."""

    job_type: Optional[JobType] = None
    due_date: Optional[datetime] = None
    technician_id: Any = UNCHANGED
    status: Optional[JobStatus] = None
    priority: Optional[JobPriority] = None
    description: Optional[str] = None

    def __post_init__(self):
        self.due_date = as_utc(self.due_date)

    @property
    def changes_technician(self) -> bool:
        return self.technician_id is not UNCHANGED

    @property
    def is_status_only(self) -> bool:
        return (
            self.status is not None
            and not self.changes_technician
            and self.job_type is None
            and self.due_date is None
            and self.priority is None
            and self.description is None
        )


@dataclass
class AssignmentResponse:
    """Combined job + technician payload returned by assign / claim."""

    job: Job
    technician: Technician


@dataclass
class ReportFile:
    """Uploaded completion report."""

    filename: str
    content: bytes
    content_type: str


@dataclass
class CompletionRequest:
    """Single atomic completion request."""

    report: ReportFile
    invoice: Optional[Invoice] = None

    @property
    def has_invoice(self) -> bool:
        return self.invoice is not None


class JobGatewayInterface(ABC):
    """Job service contract."""

    @abstractmethod
    async def list_jobs(self, filters: Optional[JobFilters] = None) -> JobPage:
        """List jobs with pagination and status statistics."""
        pass

    @abstractmethod
    async def get_job(self, job_id: str) -> Optional[Job]:
        """Get job by ID."""
        pass

    @abstractmethod
    async def create_job(self, draft: JobDraft) -> Job:
        """Create a new job."""
        pass

    @abstractmethod
    async def update_job(self, job_id: str, update: JobUpdate) -> Job:
        """Apply a partial update to a job."""
        pass

    @abstractmethod
    async def update_job_status(self, job_id: str, status: JobStatus) -> Job:
        """Narrow status-only update."""
        pass

    @abstractmethod
    async def assign_job(self, job_id: str, technician_id: str) -> AssignmentResponse:
        """Assign a job to a technician."""
        pass

    @abstractmethod
    async def claim_job(self, job_id: str, technician_id: str) -> AssignmentResponse:
        """Claim a job for the acting technician."""
        pass

    @abstractmethod
    async def complete_job(self, job_id: str, request: CompletionRequest) -> Job:
        """Complete a job with its report and optional invoice."""
        pass

    @abstractmethod
    async def list_available_jobs(
        self, filters: Optional[JobFilters] = None
    ) -> JobPage:
        """List unassigned, claimable jobs."""
        pass


class TechnicianGatewayInterface(ABC):
    """Technician service contract."""

    @abstractmethod
    async def list_technicians(
        self, filters: Optional[TechnicianFilters] = None
    ) -> List[Technician]:
        """List technicians."""
        pass

    @abstractmethod
    async def get_technician(self, technician_id: str) -> Optional[Technician]:
        """Get technician by ID."""
        pass
