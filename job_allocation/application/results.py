"""
Discriminated results returned by user-facing allocation actions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, Optional, TypeVar

from job_allocation.domain.exceptions.allocation_error import (
    AllocationError,
    JobNotFoundError,
    TechnicianNotFoundError,
)
from job_allocation.domain.exceptions.gateway_error import (
    GatewayAPIError,
    GatewayUnavailableError,
)
from job_allocation.domain.exceptions.validation_error import ValidationError

T = TypeVar("T")


class ErrorType(str, Enum):
    """Failure taxonomy for allocation actions."""

    VALIDATION = "validation"
    PRECONDITION = "precondition"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"

    @property
    def is_retryable(self) -> bool:
        return self == self.TRANSIENT

    @property
    def requires_refresh(self) -> bool:
        """Server-rejected failures mean the local snapshot is stale."""
        return self in [self.PRECONDITION, self.NOT_FOUND]


@dataclass
class ActionResult(Generic[T]):
    """Success-with-payload or failure-with-reason."""

    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    error_type: Optional[ErrorType] = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T = None, message: Optional[str] = None) -> "ActionResult[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def failure(
        cls,
        error_type: ErrorType,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
    ) -> "ActionResult[T]":
        return cls(
            success=False,
            message=message,
            error_type=error_type,
            field_errors=dict(field_errors or {}),
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "ActionResult[T]":
        """Classify an exception raised while running an action."""
        if isinstance(exc, ValidationError):
            return cls.failure(ErrorType.VALIDATION, exc.message, exc.field_errors)

        if isinstance(exc, (JobNotFoundError, TechnicianNotFoundError)):
            return cls.failure(ErrorType.NOT_FOUND, str(exc))

        if isinstance(exc, AllocationError):
            return cls.failure(ErrorType.PRECONDITION, str(exc))

        if isinstance(exc, GatewayAPIError):
            if exc.is_not_found:
                return cls.failure(ErrorType.NOT_FOUND, exc.message)
            if exc.is_precondition_failure:
                return cls.failure(ErrorType.PRECONDITION, exc.message)
            return cls.failure(
                ErrorType.TRANSIENT, f"{exc.message}. Please try again."
            )

        if isinstance(exc, GatewayUnavailableError):
            return cls.failure(
                ErrorType.TRANSIENT,
                "The job service could not be reached. Please try again.",
            )

        return cls.failure(
            ErrorType.TRANSIENT, "An unexpected error occurred. Please try again."
        )
