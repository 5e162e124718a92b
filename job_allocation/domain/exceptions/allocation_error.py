"""
Allocation-related domain exceptions.
"""

from datetime import date


class AllocationError(Exception):
    """Base exception for allocation precondition failures."""

    pass


class JobNotFoundError(AllocationError):
    """Raised when a job cannot be found."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class TechnicianNotFoundError(AllocationError):
    """Raised when a technician cannot be found."""

    def __init__(self, technician_id: str):
        self.technician_id = technician_id
        super().__init__(f"Technician {technician_id} not found")


class JobNotClaimableError(AllocationError):
    """Raised when a job is no longer open for assignment or claiming."""

    def __init__(self, job_id: str, current_status: str):
        self.job_id = job_id
        self.current_status = current_status
        super().__init__(f"Job {job_id} is no longer available")


class InvalidTransitionError(AllocationError):
    """Raised when a job status transition is not permitted."""

    def __init__(self, current_status: str, target_status: str, reason: str = ""):
        self.current_status = current_status
        self.target_status = target_status
        message = f"Cannot move job from '{current_status}' to '{target_status}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CompletionNotDueError(AllocationError):
    """Raised when completion is attempted before the job's due date."""

    def __init__(self, job_id: str, due_date: date):
        self.job_id = job_id
        self.due_date = due_date
        super().__init__(
            f"Job {job_id} cannot be completed before its due date ({due_date.isoformat()})"
        )


class ActionInProgressError(AllocationError):
    """Raised when the same action is already outstanding for a job."""

    def __init__(self, action: str, job_id: str):
        self.action = action
        self.job_id = job_id
        super().__init__(f"A {action} request for job {job_id} is already in progress")
