"""Allocation board endpoints."""

from typing import Literal, Optional

import structlog
from fastapi import APIRouter, Query

from job_allocation.api.dependencies import CoordinatorDep
from job_allocation.api.schemas.common import BaseResponse, error_response
from job_allocation.api.schemas.job import BoardResponse
from job_allocation.application.services.job_presentation import ALL

logger = structlog.get_logger()
router = APIRouter(prefix="/allocation", tags=["allocation"])


@router.get("/board", response_model=BoardResponse)
async def get_board(
    coordinator: CoordinatorDep,
    sort_by: Optional[Literal["priority", "due_date"]] = None,
    order: Literal["asc", "desc"] = "asc",
    skill: str = Query(ALL, description="Technician specialty, or 'all'"),
    search: Optional[str] = None,
):
    """Pending jobs and technicians, sorted and filtered."""
    view = await coordinator.board_view(
        sort_by=sort_by,
        descending=order == "desc",
        skill=skill,
        search=search,
    )
    return BoardResponse.from_view(view, coordinator.clock())


@router.post("/refresh", response_model=BaseResponse)
async def refresh_board(coordinator: CoordinatorDep):
    """Refetch jobs and technicians from the job service."""
    result = await coordinator.refresh()
    if not result.success:
        return error_response(result)

    logger.info("Board refresh requested")
    return BaseResponse(message="Board refreshed")
