"""
Application interfaces package.
"""

from .gateways import (
    UNCHANGED,
    AssignmentResponse,
    CompletionRequest,
    JobDraft,
    JobFilters,
    JobGatewayInterface,
    JobPage,
    JobUpdate,
    Pagination,
    ReportFile,
    TechnicianFilters,
    TechnicianGatewayInterface,
)

__all__ = [
    "UNCHANGED",
    "AssignmentResponse",
    "CompletionRequest",
    "JobDraft",
    "JobFilters",
    "JobGatewayInterface",
    "JobPage",
    "JobUpdate",
    "Pagination",
    "ReportFile",
    "TechnicianFilters",
    "TechnicianGatewayInterface",
]
