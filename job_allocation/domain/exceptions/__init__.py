"""
Domain exceptions package.
"""

from .allocation_error import (
    ActionInProgressError,
    AllocationError,
    CompletionNotDueError,
    InvalidTransitionError,
    JobNotClaimableError,
    JobNotFoundError,
    TechnicianNotFoundError,
)
from .gateway_error import GatewayAPIError, GatewayError, GatewayUnavailableError
from .validation_error import (
    CompletionValidationError,
    InvalidFormatError,
    RequiredFieldError,
    ValidationError,
)

__all__ = [
    "ActionInProgressError",
    "AllocationError",
    "CompletionNotDueError",
    "CompletionValidationError",
    "GatewayAPIError",
    "GatewayError",
    "GatewayUnavailableError",
    "InvalidFormatError",
    "InvalidTransitionError",
    "JobNotClaimableError",
    "JobNotFoundError",
    "RequiredFieldError",
    "TechnicianNotFoundError",
    "ValidationError",
]
