"""
Configuration package.
"""

from .logging import configure_logging, get_logger
from .settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    # Logging
    "configure_logging",
    "get_logger",
]
