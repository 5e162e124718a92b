"""
Technician availability value object.
"""

from enum import Enum


class Availability(str, Enum):
    """Technician availability enumeration."""

    AVAILABLE = "Available"
    BUSY = "Busy"
    UNAVAILABLE = "Unavailable"
    ON_LEAVE = "On Leave"

    def selectable_for_edit(self) -> bool:
        """Check if technician can be picked when editing an assigned job."""
        return self in [self.AVAILABLE, self.BUSY]
