"""Technician endpoints."""

from typing import List, Optional

from fastapi import APIRouter

from job_allocation.api.dependencies import CoordinatorDep
from job_allocation.api.schemas.technician import TechnicianResponse

router = APIRouter(prefix="/technicians", tags=["technicians"])


@router.get("/eligible", response_model=List[TechnicianResponse])
async def list_eligible_technicians(
    coordinator: CoordinatorDep, job_id: Optional[str] = None
):
    """
    Technicians that may be selected.

    Without ``job_id`` this is the creation list (Available only). With it,
    Busy technicians and the one already holding the job are included.
    """
    technicians = await coordinator.eligible_technicians(job_id)
    return [TechnicianResponse.from_entity(t) for t in technicians]
