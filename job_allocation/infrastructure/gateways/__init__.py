"""
Compliance service gateways package.
"""

from .factory import ComplianceGateway, GatewayFactory
from .memory import InMemoryComplianceGateway
from .rest import ComplianceAPIClient, ComplianceTransformer, RestComplianceGateway

__all__ = [
    "ComplianceAPIClient",
    "ComplianceGateway",
    "ComplianceTransformer",
    "GatewayFactory",
    "InMemoryComplianceGateway",
    "RestComplianceGateway",
]
