"""
Compliance API client.

Every endpoint answers with ``{"status": "success"|"error", "message", "data"}``.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from job_allocation.domain.exceptions.gateway_error import GatewayAPIError
from job_allocation.infrastructure.external.http_client import HTTPClient

logger = structlog.get_logger()


class ComplianceAPIClient:
    """Thin envelope-aware wrapper over the HTTP client."""

    def __init__(self, http_client: HTTPClient):
        self.http = http_client

    async def close(self) -> None:
        await self.http.close()

    def _unwrap(self, response: httpx.Response, action: str) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = None
            if isinstance(body, dict):
                message = body.get("message")
            error = GatewayAPIError(
                response.status_code, message or f"Failed to {action}"
            )
            log = logger.error if error.is_transient else logger.warning
            log(
                "Compliance API request failed",
                action=action,
                status_code=error.status_code,
                message=error.message,
            )
            raise error

        if not isinstance(body, dict):
            raise GatewayAPIError(502, f"Invalid response while trying to {action}")

        if body.get("status") != "success":
            # Rejected with a 2xx status; treated as a refused precondition
            raise GatewayAPIError(400, body.get("message") or f"Failed to {action}")

        return body.get("data") or {}

    async def get(
        self, path: str, action: str, params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        response = await self.http.get(path, params=params)
        return self._unwrap(response, action)

    async def post(self, path: str, action: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.http.post(path, data=data)
        return self._unwrap(response, action)

    async def put(self, path: str, action: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.http.put(path, data=data)
        return self._unwrap(response, action)

    async def patch(
        self,
        path: str,
        action: str,
        data: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        response = await self.http.patch(path, data=data, form=form, files=files)
        return self._unwrap(response, action)
