"""
Domain entities package.
"""

from .invoice import Invoice, InvoiceLineItem, money
from .job import Job
from .technician import Technician

__all__ = [
    "Invoice",
    "InvoiceLineItem",
    "Job",
    "Technician",
    "money",
]
