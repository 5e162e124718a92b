"""
Job priority value object.
"""

from enum import Enum
from typing import Optional


class JobPriority(str, Enum):
    """Job priority enumeration."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @property
    def rank(self) -> int:
        """Get sort rank, higher is more pressing."""
        return {
            self.URGENT: 4,
            self.HIGH: 3,
            self.MEDIUM: 2,
            self.LOW: 1,
        }[self]

    @classmethod
    def rank_of(cls, value: Optional[str]) -> int:
        """Rank a raw priority value; missing or unknown values rank 0."""
        if value is None:
            return 0
        try:
            return cls(value).rank
        except ValueError:
            return 0
