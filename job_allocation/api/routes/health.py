"""
Health check endpoints for the application.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from job_allocation.api.dependencies import CoordinatorDep
from job_allocation.config.logging import get_logger
from job_allocation.config.settings import settings
from job_allocation.infrastructure.monitoring.metrics import (
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def health_check(coordinator: CoordinatorDep) -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "board_loaded": coordinator.board.loaded,
        "timestamp": _timestamp(),
    }


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    """Liveness check for Kubernetes."""
    return {"status": "alive", "timestamp": _timestamp()}


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.ENABLE_METRICS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Metrics are disabled"
        )

    metrics_data = get_metrics()
    logger.debug("Prometheus metrics requested")
    return Response(content=metrics_data, media_type=get_metrics_content_type())
