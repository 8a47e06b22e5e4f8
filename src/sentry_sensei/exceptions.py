"""Exception types raised by the Sentry Sensei MCP server."""

from typing import Any

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData


class SenseiError(Exception):
    """Base exception for Sentry Sensei errors."""

    pass


def invalid_params(message: str, data: Any = None) -> McpError:
    """Build an invalid-params protocol error."""
    return McpError(ErrorData(code=INVALID_PARAMS, message=message, data=data))


class MissingCredentialError(McpError):
    """Raised when an upstream client is built without a required credential.

    The message names the tool argument, the request header and the
    environment variable that would satisfy it.
    """

    def __init__(self, service: str, field: str, header: str, env_var: str) -> None:
        self.service = service
        self.field = field
        self.header = header
        self.env_var = env_var
        message = (
            f"{service} {field} is required. Provide it via the {header} header, "
            f"the {env_var} environment variable, or the matching CLI option."
        )
        super().__init__(ErrorData(code=INVALID_PARAMS, message=message))


class UpstreamApiError(SenseiError):
    """An upstream REST API call failed.

    Keeps the HTTP status and the response body text so callers can
    categorize the failure.
    """

    category = "request_failed"
    json_rpc_code = INTERNAL_ERROR
    client_error = False

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.service = service
        self.message = message
        self.status_code = status_code
        self.body = body

    def user_message(self) -> str:
        return (
            f"{self.service} request failed.\n\nDetails: {self.message}\n\n"
            "Please check your parameters and try again."
        )

    def to_error_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "category": self.category,
            "status": self.status_code,
            "service": self.service,
        }
        return data


class UpstreamBadRequestError(UpstreamApiError):
    """Upstream rejected the request as malformed (400)."""

    category = "bad_request"
    json_rpc_code = INVALID_PARAMS
    client_error = True

    def user_message(self) -> str:
        return (
            f"Bad Request: Invalid parameters sent to {self.service}.\n\n"
            f"Details: {self.message}\n\nPlease check your parameters and try again."
        )


class UpstreamAuthenticationError(UpstreamApiError):
    """Upstream authentication or authorization failed (401/403)."""

    category = "authentication"
    json_rpc_code = INVALID_PARAMS
    client_error = True

    def user_message(self) -> str:
        return (
            f"Authentication failed with {self.service}.\n\n"
            f"Details: {self.message}\n\n"
            "Please check your API credentials and permissions."
        )


class UpstreamNotFoundError(UpstreamApiError):
    """Upstream resource does not exist or is not visible (404)."""

    category = "not_found"
    json_rpc_code = INVALID_PARAMS
    client_error = True

    def user_message(self) -> str:
        return (
            f"Resource not found in {self.service}.\n\n"
            f"Details: {self.message}\n\n"
            "Please verify the ID/key exists and you have access to it."
        )


class UpstreamRateLimitError(UpstreamApiError):
    """Upstream rate limit exceeded (429)."""

    category = "rate_limited"
    client_error = True

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = 429,
        body: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(service, message, status_code, body)
        self.retry_after = retry_after

    def user_message(self) -> str:
        if self.retry_after:
            retry = f"Try again in {self.retry_after} seconds."
        else:
            retry = "Please try again later."
        return (
            f"Rate limit exceeded for {self.service}. {retry}\n\n"
            f"Details: {self.message}"
        )

    def to_error_data(self) -> dict[str, Any]:
        data = super().to_error_data()
        if self.retry_after is not None:
            data["retryAfter"] = self.retry_after
        return data


class UpstreamServerError(UpstreamApiError):
    """Upstream returned a 5xx response."""

    category = "server_error"

    def user_message(self) -> str:
        return (
            f"{self.service} server error ({self.status_code or 'Unknown'}).\n\n"
            f"Details: {self.message}\n\n"
            "The service may be temporarily unavailable. Please try again later."
        )


class UpstreamTimeoutError(UpstreamApiError):
    """Upstream call exceeded its timeout."""

    category = "timeout"

    def __init__(self, service: str, operation: str, timeout: float) -> None:
        super().__init__(
            service,
            f"{service} API request timed out after {timeout:g} seconds "
            f"while {operation}",
        )
        self.timeout = timeout
