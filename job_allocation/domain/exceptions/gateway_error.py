"""
Gateway-related domain exceptions for the external compliance API.
"""


class GatewayError(Exception):
    """Base exception for external API errors."""

    pass


class GatewayAPIError(GatewayError):
    """Raised when the external API rejects a request."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Compliance API error ({status_code}): {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_precondition_failure(self) -> bool:
        return self.status_code in (400, 409, 422)

    @property
    def is_transient(self) -> bool:
        return self.status_code >= 500 or self.status_code in (0, 408, 429)


class GatewayUnavailableError(GatewayError):
    """Raised on network failure or timeout talking to the external API."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Compliance API unavailable: {message}")
