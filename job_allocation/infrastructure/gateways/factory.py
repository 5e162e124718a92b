"""
Gateway factory for creating the configured compliance backend.
"""

from typing import Optional, Union

import httpx

from job_allocation.config.logging import get_logger
from job_allocation.config.settings import Settings, settings
from job_allocation.infrastructure.external.http_client import HTTPClient
from job_allocation.infrastructure.gateways.memory.gateway import (
    InMemoryComplianceGateway,
)
from job_allocation.infrastructure.gateways.rest.client import ComplianceAPIClient
from job_allocation.infrastructure.gateways.rest.gateway import RestComplianceGateway
from job_allocation.infrastructure.gateways.rest.transformer import (
    ComplianceTransformer,
)

logger = get_logger(__name__)

ComplianceGateway = Union[RestComplianceGateway, InMemoryComplianceGateway]


class GatewayFactory:
    """Factory for creating gateway instances."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings

    def create_gateway(
        self, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> ComplianceGateway:
        """Create the job and technician gateway selected by configuration."""
        if self.config.USE_IN_MEMORY_GATEWAY:
            logger.info("Using in-memory compliance gateway")
            return InMemoryComplianceGateway()

        logger.info(
            "Using compliance REST gateway",
            base_url=self.config.COMPLIANCE_API_BASE_URL,
        )
        http_client = HTTPClient(
            base_url=self.config.COMPLIANCE_API_BASE_URL,
            token=self.config.COMPLIANCE_API_TOKEN,
            timeout=self.config.COMPLIANCE_API_TIMEOUT,
            transport=transport,
        )
        return RestComplianceGateway(
            ComplianceAPIClient(http_client),
            ComplianceTransformer(default_max_jobs=self.config.DEFAULT_MAX_JOBS),
        )
