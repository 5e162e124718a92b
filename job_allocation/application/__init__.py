"""
Application layer package.

This package contains use cases, services, and interfaces that implement
the allocation workflow.
"""

from .interfaces.gateways import (
    JobGatewayInterface,
    TechnicianGatewayInterface,
)
from .results import ActionResult, ErrorType
from .services.allocation_coordinator import AllocationCoordinator
from .services.capacity_model import CapacityModel
from .services.job_state_machine import JobStateMachine
from .use_cases.assign_job import AssignJobUseCase
from .use_cases.claim_job import ClaimJobUseCase
from .use_cases.complete_job import CompleteJobUseCase
from .use_cases.create_job import CreateJobUseCase
from .use_cases.update_job import UpdateJobUseCase

__all__ = [
    # Interfaces
    "JobGatewayInterface",
    "TechnicianGatewayInterface",
    # Results
    "ActionResult",
    "ErrorType",
    # Services
    "AllocationCoordinator",
    "CapacityModel",
    "JobStateMachine",
    # Use Cases
    "AssignJobUseCase",
    "ClaimJobUseCase",
    "CompleteJobUseCase",
    "CreateJobUseCase",
    "UpdateJobUseCase",
]
