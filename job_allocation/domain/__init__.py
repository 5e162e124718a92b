"""
Domain package.
"""

from .entities import *
from .exceptions import *
from .value_objects import *

__all__ = [
    # Entities
    "Invoice",
    "InvoiceLineItem",
    "Job",
    "Technician",
    # Exceptions
    "AllocationError",
    "GatewayError",
    "ValidationError",
    # Value Objects
    "Availability",
    "JobPriority",
    "JobStatus",
    "JobType",
    "PropertyRef",
    "TechnicianRef",
    "WorkloadLevel",
]
