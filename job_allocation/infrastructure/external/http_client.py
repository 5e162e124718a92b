"""
HTTP client utilities for the compliance API.
"""

import time
from typing import Any, Dict, Optional

import httpx
import structlog

from job_allocation.domain.exceptions.gateway_error import GatewayUnavailableError
from job_allocation.infrastructure.monitoring.metrics import record_gateway_request

logger = structlog.get_logger()


class HTTPClient:
    """HTTP client bound to one API base URL and bearer token."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self.client is None:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self.client

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Make a request and log its timing.

        Network failures and timeouts are raised as GatewayUnavailableError;
        HTTP error statuses are returned for the caller to interpret.
        """
        client = self._ensure_client()
        start_time = time.time()

        try:
            response = await client.request(
                method, url, params=params, json=json, data=data, files=files
            )

            response_time = (time.time() - start_time) * 1000
            record_gateway_request(method, response.status_code, response_time / 1000)

            logger.debug(
                f"HTTP {method} request completed",
                url=url,
                status_code=response.status_code,
                response_time_ms=response_time,
            )

            return response

        except httpx.HTTPError as e:
            response_time = (time.time() - start_time) * 1000
            record_gateway_request(method, 0, response_time / 1000)

            logger.error(
                f"HTTP {method} request failed",
                url=url,
                error=str(e),
                response_time_ms=response_time,
            )
            raise GatewayUnavailableError(str(e) or type(e).__name__) from e

    async def get(
        self, url: str, params: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """Make GET request."""
        return await self.request("GET", url, params=params)

    async def post(
        self, url: str, data: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Make POST request."""
        return await self.request("POST", url, json=data)

    async def put(
        self, url: str, data: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Make PUT request."""
        return await self.request("PUT", url, json=data)

    async def patch(
        self,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Make PATCH request; ``form``/``files`` send multipart instead of JSON."""
        if files is not None or form is not None:
            return await self.request("PATCH", url, data=form, files=files)
        return await self.request("PATCH", url, json=data)
