"""
API schemas for the job allocation service.
"""

from .common import BaseResponse, ErrorResponse, error_response
from .job import (
    AssignJobRequest,
    AssignmentResultResponse,
    BoardResponse,
    CompletionResultResponse,
    InvoiceSubmission,
    JobActionResponse,
    JobCreateRequest,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
)
from .technician import TechnicianResponse

__all__ = [
    "AssignJobRequest",
    "AssignmentResultResponse",
    "BaseResponse",
    "BoardResponse",
    "CompletionResultResponse",
    "ErrorResponse",
    "InvoiceSubmission",
    "JobActionResponse",
    "JobCreateRequest",
    "JobListResponse",
    "JobResponse",
    "JobUpdateRequest",
    "TechnicianResponse",
    "error_response",
]
