"""
Common API schemas.
"""

from typing import Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from job_allocation.application.results import ActionResult, ErrorType

ERROR_STATUS_CODES = {
    ErrorType.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorType.PRECONDITION: status.HTTP_409_CONFLICT,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class BaseResponse(BaseModel):
    """Base response schema."""

    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseResponse):
    """Error response schema."""

    success: bool = False
    error_type: Optional[str] = None
    retryable: bool = False
    field_errors: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ActionResult) -> "ErrorResponse":
        return cls(
            message=result.message,
            error_type=result.error_type.value if result.error_type else None,
            retryable=bool(result.error_type and result.error_type.is_retryable),
            field_errors=result.field_errors,
        )


def error_response(result: ActionResult) -> JSONResponse:
    """Render a failed action with the HTTP status matching its error type."""
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(
            result.error_type, status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        content=ErrorResponse.from_result(result).model_dump(),
    )
