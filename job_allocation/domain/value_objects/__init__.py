"""
Domain value objects package.
"""

from .availability import Availability
from .job_priority import JobPriority
from .job_status import JobStatus
from .job_type import JobType
from .references import PropertyRef, TechnicianRef
from .workload_level import WorkloadLevel

__all__ = [
    "Availability",
    "JobPriority",
    "JobStatus",
    "JobType",
    "PropertyRef",
    "TechnicianRef",
    "WorkloadLevel",
]
