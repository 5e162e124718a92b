"""
Workload level value object.
"""

from enum import Enum


class WorkloadLevel(str, Enum):
    """Presentational bucket for technician capacity utilisation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def from_capacity(cls, current_jobs: int, max_jobs: int) -> "WorkloadLevel":
        """Bucket by percentage full: <40 low, <70 medium, <90 high, else critical."""
        if max_jobs <= 0:
            return cls.CRITICAL

        percentage = (current_jobs / max_jobs) * 100
        if percentage >= 90:
            return cls.CRITICAL
        if percentage >= 70:
            return cls.HIGH
        if percentage >= 40:
            return cls.MEDIUM
        return cls.LOW
