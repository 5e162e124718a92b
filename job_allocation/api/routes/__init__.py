"""
API routes package.
"""

from .allocation import router as allocation_router
from .health import router as health_router
from .jobs import router as jobs_router
from .technicians import router as technicians_router

__all__ = [
    "allocation_router",
    "health_router",
    "jobs_router",
    "technicians_router",
]
