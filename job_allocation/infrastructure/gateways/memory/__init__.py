"""
In-memory gateway package.
"""

from .gateway import InMemoryComplianceGateway

__all__ = ["InMemoryComplianceGateway"]
