"""
Compliance Job Allocation Service.

Matches pending compliance jobs to technicians, drives job status
transitions and finalizes completed jobs with their invoices.
"""

__version__ = "0.1.0"
__description__ = "Compliance Job Allocation Service"
