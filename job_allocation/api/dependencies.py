"""
FastAPI dependency injection container.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from job_allocation.application.services.allocation_coordinator import (
    AllocationCoordinator,
)
from job_allocation.config.logging import get_logger
from job_allocation.config.settings import settings
from job_allocation.infrastructure.gateways.factory import (
    ComplianceGateway,
    GatewayFactory,
)

logger = get_logger(__name__)


# Gateway Dependencies
@lru_cache()
def get_gateway() -> ComplianceGateway:
    """Get the process-wide compliance gateway."""
    return GatewayFactory(settings).create_gateway()


# Service Dependencies
@lru_cache()
def get_coordinator() -> AllocationCoordinator:
    """Get the process-wide allocation coordinator and its board snapshot."""
    gateway = get_gateway()
    return AllocationCoordinator(
        job_gateway=gateway,
        technician_gateway=gateway,
        refresh_after_assign=settings.REFRESH_BOARD_AFTER_ASSIGN,
        report_content_type=settings.REPORT_CONTENT_TYPE,
    )


async def close_dependencies() -> None:
    """Release the gateway's HTTP resources."""
    if get_gateway.cache_info().currsize:
        await get_gateway().close()
    get_coordinator.cache_clear()
    get_gateway.cache_clear()


async def get_acting_technician(
    x_technician_id: Annotated[Optional[str], Header()] = None,
) -> str:
    """Acting technician taken from the session stand-in header."""
    if not x_technician_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Technician session required",
        )
    return x_technician_id


# Type aliases for cleaner dependency injection
CoordinatorDep = Annotated[AllocationCoordinator, Depends(get_coordinator)]
ActingTechnicianDep = Annotated[str, Depends(get_acting_technician)]
