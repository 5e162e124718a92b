"""
API package.
"""

from .app import create_app
from .dependencies import *
from .middleware import *
from .routes import *
from .schemas import *

__all__ = [
    "create_app",
    # Dependencies
    "CoordinatorDep",
    "ActingTechnicianDep",
    "get_coordinator",
    "get_gateway",
    # Middleware
    "ErrorHandlerMiddleware",
    "LoggingMiddleware",
    # Routes
    "allocation_router",
    "health_router",
    "jobs_router",
    "technicians_router",
]
