"""
Technician-related API schemas.
"""

from typing import List

from pydantic import BaseModel, Field

from job_allocation.domain.entities.technician import Technician
from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.workload_level import WorkloadLevel


class TechnicianResponse(BaseModel):
    """Technician response schema."""

    id: str
    name: str
    email: str = ""
    phone: str = ""
    experience: int = 0
    availability: Availability
    current_jobs: int
    max_jobs: int
    workload_level: WorkloadLevel = Field(
        ..., description="Presentational load bucket, never blocks assignment"
    )
    completed_jobs: int = 0
    average_rating: float = 0.0
    specialties: List[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, technician: Technician) -> "TechnicianResponse":
        return cls(
            id=technician.id,
            name=technician.name,
            email=technician.email,
            phone=technician.phone,
            experience=technician.experience,
            availability=technician.availability,
            current_jobs=technician.current_jobs,
            max_jobs=technician.max_jobs,
            workload_level=technician.workload_level,
            completed_jobs=technician.completed_jobs,
            average_rating=technician.average_rating,
            specialties=sorted(technician.specialties),
        )
