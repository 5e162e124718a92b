"""
Error handling middleware.
"""

import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from job_allocation.config.logging import get_logger
from job_allocation.domain.exceptions import (
    AllocationError,
    GatewayAPIError,
    GatewayUnavailableError,
    JobNotFoundError,
    TechnicianNotFoundError,
    ValidationError,
)

logger = get_logger(__name__)


class ErrorHandlerMiddleware:
    """Error handling middleware for FastAPI."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_error_handlers()

    def add_error_handlers(self) -> None:
        """Add custom error handlers to FastAPI app."""
        add_error_handlers(self.app)


def _error_body(error: str, message: str, error_type: str, **extra) -> dict:
    body = {"status": "error", "error": error, "message": message, "type": error_type}
    body.update(extra)
    return body


def add_error_handlers(app: FastAPI) -> None:
    """Add custom error handlers to FastAPI app."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning("Validation error", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=422,
            content=_error_body(
                "Validation Error",
                exc.message,
                "validation",
                field_errors=exc.field_errors,
            ),
        )

    @app.exception_handler(JobNotFoundError)
    @app.exception_handler(TechnicianNotFoundError)
    async def not_found_handler(request: Request, exc: AllocationError):
        logger.warning("Resource not found", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=404,
            content=_error_body("Not Found", str(exc), "not_found"),
        )

    @app.exception_handler(AllocationError)
    async def allocation_error_handler(request: Request, exc: AllocationError):
        logger.warning("Allocation rejected", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=409,
            content=_error_body("Allocation Error", str(exc), "precondition"),
        )

    @app.exception_handler(GatewayAPIError)
    async def gateway_api_error_handler(request: Request, exc: GatewayAPIError):
        if exc.is_not_found:
            status_code, error_type = 404, "not_found"
        elif exc.is_precondition_failure:
            status_code, error_type = 409, "precondition"
        else:
            status_code, error_type = 503, "transient"

        logger.error(
            "Compliance API error",
            error=str(exc),
            upstream_status=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status_code,
            content=_error_body("Compliance API Error", exc.message, error_type),
        )

    @app.exception_handler(GatewayUnavailableError)
    async def gateway_unavailable_handler(
        request: Request, exc: GatewayUnavailableError
    ):
        logger.error("Compliance API unavailable", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=503,
            content=_error_body(
                "Service Unavailable",
                "The job service could not be reached, please try again",
                "transient",
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("HTTP Error", exc.detail, "http_error"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            traceback=traceback.format_exc(),
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "Internal Server Error",
                "An unexpected error occurred",
                "internal_error",
            ),
        )
