"""
Technician domain entity.
"""

from dataclasses import dataclass, field
from typing import FrozenSet

from job_allocation.domain.value_objects.availability import Availability
from job_allocation.domain.value_objects.references import TechnicianRef
from job_allocation.domain.value_objects.workload_level import WorkloadLevel


@dataclass
class Technician:
    """Technician entity carrying capacity and availability."""

    id: str
    name: str
    email: str = ""
    phone: str = ""
    experience: int = 0
    availability: Availability = Availability.AVAILABLE
    current_jobs: int = 0
    max_jobs: int = 5
    completed_jobs: int = 0
    average_rating: float = 0.0
    total_ratings: int = 0
    specialties: FrozenSet[str] = field(default_factory=frozenset)
    status: str = "Active"

    def __post_init__(self):
        if not self.id:
            raise ValueError("Technician id is required")
        if self.current_jobs < 0:
            raise ValueError("current_jobs cannot be negative")
        if self.max_jobs < 0:
            raise ValueError("max_jobs cannot be negative")
        self.specialties = frozenset(self.specialties)

    @property
    def workload_level(self) -> WorkloadLevel:
        return WorkloadLevel.from_capacity(self.current_jobs, self.max_jobs)

    @property
    def has_spare_capacity(self) -> bool:
        return self.current_jobs < self.max_jobs

    @property
    def is_over_capacity(self) -> bool:
        return self.current_jobs > self.max_jobs

    def has_specialty(self, skill: str) -> bool:
        return skill in self.specialties

    def to_ref(self) -> TechnicianRef:
        """Build the denormalized reference stored on jobs."""
        return TechnicianRef(id=self.id, display_name=self.name)

    def to_dict(self) -> dict:
        """Convert technician to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "experience": self.experience,
            "availability": self.availability.value,
            "current_jobs": self.current_jobs,
            "max_jobs": self.max_jobs,
            "workload_level": self.workload_level.value,
            "completed_jobs": self.completed_jobs,
            "average_rating": self.average_rating,
            "total_ratings": self.total_ratings,
            "specialties": sorted(self.specialties),
            "status": self.status,
        }
