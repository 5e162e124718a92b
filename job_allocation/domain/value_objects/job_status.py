"""
Job status value object.
"""

from enum import Enum


class JobStatus(str, Enum):
    """Job lifecycle status enumeration."""

    PENDING = "Pending"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"

    def releases_technician(self) -> bool:
        """Check if entering this status must clear the assigned technician."""
        return self in [self.PENDING, self.CANCELLED]

    def is_final(self) -> bool:
        """Check if status is final (no more processing)."""
        return self in [self.COMPLETED, self.CANCELLED]

    def holds_capacity(self) -> bool:
        """Check if an assigned job in this status counts toward the technician load."""
        return self not in [self.COMPLETED, self.CANCELLED]

    def can_be_claimed(self) -> bool:
        """Check if status allows a technician to claim the job."""
        return self == self.PENDING

    def can_be_completed(self) -> bool:
        """Check if status allows the completion workflow."""
        return self in [self.SCHEDULED, self.OVERDUE]
