"""Job domain entity."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from job_allocation.domain.value_objects.job_priority import JobPriority
from job_allocation.domain.value_objects.job_status import JobStatus
from job_allocation.domain.value_objects.job_type import JobType
from job_allocation.domain.value_objects.references import PropertyRef, TechnicianRef


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so due dates stay comparable."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class Job:
    """Job domain entity."""

    id: str
    job_id: str
    job_type: JobType
    status: JobStatus = JobStatus.PENDING
    priority: Optional[JobPriority] = JobPriority.MEDIUM
    due_date: Optional[datetime] = None  # None when the source value was unparseable
    property_ref: Optional[PropertyRef] = None
    technician: Optional[TechnicianRef] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    has_invoice: bool = False
    invoice_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate job data."""
        if not self.id:
            raise ValueError("Job id is required")

        self.due_date = as_utc(self.due_date)
        self.created_at = as_utc(self.created_at)

    @property
    def is_assigned(self) -> bool:
        return self.technician is not None

    @property
    def technician_id(self) -> Optional[str]:
        return self.technician.id if self.technician else None

    @property
    def property_address(self) -> str:
        return self.property_ref.address if self.property_ref else ""

    @property
    def due_day(self) -> Optional[date]:
        """Due date truncated to the calendar day (midnight)."""
        return self.due_date.date() if self.due_date else None

    def is_claimable(self) -> bool:
        """Check if the job is open for assignment or self-claim."""
        return self.status.can_be_claimed() and not self.is_assigned

    def is_due(self, today: date) -> bool:
        """Check if the due date has arrived (due today or already past)."""
        return self.due_day is not None and self.due_day <= today

    def is_due_today(self, today: date) -> bool:
        return self.due_day == today

    def is_overdue(self, today: date) -> bool:
        """Derived overdue classification: past due and not completed."""
        return (
            self.due_day is not None
            and self.due_day < today
            and self.status != JobStatus.COMPLETED
        )

    def display_status(self, today: date) -> JobStatus:
        """
        Status shown to operators.

        The stored status wins; jobs still Pending or Scheduled after their due
        date are highlighted as Overdue.
        """
        if self.status in (JobStatus.PENDING, JobStatus.SCHEDULED) and self.is_overdue(
            today
        ):
            return JobStatus.OVERDUE
        return self.status

    def due_label(self, today: date) -> str:
        """Human-readable due label."""
        if self.due_day is None:
            return "No due date"
        if self.due_day == today:
            return "Due today"
        if self.due_day < today:
            return "Overdue"
        return f"Due {self.due_day.isoformat()}"

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on address, type, id and description."""
        needle = term.strip().lower()
        if not needle:
            return True

        haystacks = [
            self.property_address,
            self.job_type.value,
            self.job_id or "",
            self.description or "",
        ]
        return any(needle in value.lower() for value in haystacks)

    def assign_to(self, technician: TechnicianRef) -> None:
        """Bind the job to a technician and schedule it."""
        if not self.is_claimable():
            raise ValueError("Job is not open for assignment")

        self.technician = technician
        self.status = JobStatus.SCHEDULED
        self.updated_at = datetime.now(timezone.utc)

    def reschedule(self, due_date: datetime) -> None:
        self.due_date = as_utc(due_date)
        self.updated_at = datetime.now(timezone.utc)

    def unassign(self) -> Optional[TechnicianRef]:
        """Clear the technician reference and return the released one."""
        released = self.technician
        self.technician = None
        self.updated_at = datetime.now(timezone.utc)
        return released

    def mark_completed(self, completed_at: Optional[datetime] = None) -> None:
        """Mark job as completed."""
        if self.status == JobStatus.COMPLETED:
            raise ValueError("Job is already completed")

        self.status = JobStatus.COMPLETED
        self.completed_at = completed_at or datetime.now(timezone.utc)
        self.updated_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        """Convert job to dictionary."""
        return {
            "id": self.id,
            "job_id": self.job_id,
            "job_type": self.job_type.value,
            "status": self.status.value,
            "priority": self.priority.value if self.priority else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "property": self.property_ref.to_dict() if self.property_ref else None,
            "technician": self.technician.to_dict() if self.technician else None,
            "description": self.description,
            "notes": self.notes,
            "has_invoice": self.has_invoice,
            "invoice_id": self.invoice_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat()
            if self.completed_at
            else None,
        }
