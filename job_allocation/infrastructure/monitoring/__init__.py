"""
Monitoring package.
"""

from .metrics import (
    get_metrics,
    get_metrics_content_type,
    record_allocation_action,
    record_job_completion,
)

__all__ = [
    "get_metrics",
    "get_metrics_content_type",
    "record_allocation_action",
    "record_job_completion",
]
