"""
Infrastructure package.
"""

from .external import *
from .monitoring import *

__all__ = [
    # External
    "HTTPClient",
    # Monitoring
    "get_metrics",
    "get_metrics_content_type",
    "record_allocation_action",
    "record_job_completion",
]
