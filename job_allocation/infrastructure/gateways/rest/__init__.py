"""
Compliance REST API gateway package.
"""

from .client import ComplianceAPIClient
from .gateway import RestComplianceGateway
from .transformer import ComplianceTransformer, parse_datetime

__all__ = [
    "ComplianceAPIClient",
    "ComplianceTransformer",
    "RestComplianceGateway",
    "parse_datetime",
]
