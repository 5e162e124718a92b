"""
Reference value objects for denormalized related entities.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TechnicianRef:
    """Canonical reference from a job to its assigned technician."""

    id: str
    display_name: str

    def __post_init__(self):
        """Validate reference."""
        if not self.id and not self.display_name:
            raise ValueError("Technician reference needs an id or a name")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"id": self.id, "display_name": self.display_name}


@dataclass(frozen=True)
class PropertyRef:
    """Reference from a job to the property it concerns."""

    id: str
    address: str = ""
    agency_name: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "address": self.address,
            "agency_name": self.agency_name,
        }
