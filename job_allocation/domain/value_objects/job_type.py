"""
Job type value object.
"""

from enum import Enum


class JobType(str, Enum):
    """Compliance job type enumeration."""

    GAS = "Gas"
    ELECTRICAL = "Electrical"
    SMOKE = "Smoke"
    REPAIRS = "Repairs"
    POOL_SAFETY = "Pool Safety"
    ROUTINE_INSPECTION = "Routine Inspection"
