"""
Request/Response logging middleware.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response

from job_allocation.config.logging import get_logger

logger = get_logger(__name__)

# Scrape and probe traffic is logged at debug level only
QUIET_PATH_SUFFIXES = ("/health/metrics", "/health/live")


class LoggingMiddleware:
    """Request/Response logging middleware for FastAPI."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_logging_middleware()

    def add_logging_middleware(self) -> None:
        """Add request/response logging middleware."""

        @self.app.middleware("http")
        async def logging_middleware(request: Request, call_next: Callable) -> Response:
            request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
            start_time = time.time()

            # Every log line emitted while handling this request carries its ID
            structlog.contextvars.clear_contextvars()
            structlog.contextvars.bind_contextvars(request_id=request_id)
            request.state.request_id = request_id

            log = (
                logger.debug
                if request.url.path.endswith(QUIET_PATH_SUFFIXES)
                else logger.info
            )
            log(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=str(request.query_params),
                client_host=request.client.host if request.client else None,
            )

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "Request failed",
                    method=request.method,
                    path=request.url.path,
                    error=str(e),
                    process_time=f"{time.time() - start_time:.4f}s",
                )
                raise

            process_time = time.time() - start_time
            log(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time=f"{process_time:.4f}s",
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"
            return response
