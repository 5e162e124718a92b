"""
Use cases package.

This package contains the allocation use cases that orchestrate the
application services and the job service gateways.
"""

from .assign_job import AssignJobUseCase
from .claim_job import ClaimJobUseCase
from .complete_job import CompleteJobUseCase
from .create_job import CreateJobUseCase
from .update_job import UpdateJobUseCase

__all__ = [
    "AssignJobUseCase",
    "ClaimJobUseCase",
    "CompleteJobUseCase",
    "CreateJobUseCase",
    "UpdateJobUseCase",
]
