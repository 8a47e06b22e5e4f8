import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import httpx

from sentry_sensei.exceptions import (
    UpstreamApiError,
    UpstreamAuthenticationError,
    UpstreamBadRequestError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
    UpstreamServerError,
    UpstreamTimeoutError,
    invalid_params,
)

logger = logging.getLogger("sentry-sensei.utils")


F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("retry-after")
    if value and value.strip().isdigit():
        return int(value.strip())
    return None


def error_from_response(service: str, response: httpx.Response) -> UpstreamApiError:
    """Map a failed upstream response onto the upstream error taxonomy."""
    status = response.status_code
    body = response.text
    message = f"{service} API Error: {status} {response.reason_phrase} - {body}"

    if status == 400:
        return UpstreamBadRequestError(service, message, status, body)
    if status in (401, 403):
        return UpstreamAuthenticationError(service, message, status, body)
    if status == 404:
        return UpstreamNotFoundError(service, message, status, body)
    if status == 429:
        return UpstreamRateLimitError(
            service, message, status, body, retry_after=_retry_after(response)
        )
    if status >= 500:
        return UpstreamServerError(service, message, status, body)
    return UpstreamApiError(service, message, status, body)


def handle_upstream_errors(service_name: str) -> Callable[[F], F]:
    """
    Decorator translating httpx failures of an async client method into
    `UpstreamApiError` subclasses.

    The decorated method is expected to live on a client exposing a
    ``timeout`` attribute and to accept an ``operation`` keyword naming
    what it is doing.

    Args:
        service_name: Name of the service used in messages (e.g. "Sentry").
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            operation = kwargs.get("operation") or getattr(
                func, "__name__", "API operation"
            )
            try:
                return await func(self, *args, **kwargs)
            except httpx.HTTPStatusError as http_err:
                error = error_from_response(service_name, http_err.response)
                logger.error(
                    f"HTTP error during {operation}: {http_err.response.status_code}"
                )
                raise error from http_err
            except httpx.TimeoutException as timeout_err:
                logger.error(f"Timeout during {operation} after {self.timeout}s")
                raise UpstreamTimeoutError(
                    service_name, operation.lower(), self.timeout
                ) from timeout_err
            except ValueError as decode_err:
                logger.error(f"Undecodable response during {operation}: {decode_err}")
                raise UpstreamApiError(
                    service_name,
                    f"Invalid JSON response during {operation}: {decode_err}",
                ) from decode_err
            except httpx.RequestError as request_err:
                logger.error(f"Network error during {operation}: {request_err}")
                raise UpstreamApiError(
                    service_name, f"Network error during {operation}: {request_err}"
                ) from request_err

        return wrapper  # type: ignore

    return decorator


def check_write_access(func: F) -> F:
    """
    Decorator for tool handlers that write upstream.

    Assumes the handler signature is ``(arguments, context)`` where
    ``context.config.read_only`` reflects READ_ONLY_MODE.
    """

    @wraps(func)
    async def wrapper(arguments: Any, context: Any, *args: Any, **kwargs: Any) -> Any:
        if context.config.read_only:
            tool_name = func.__name__
            action_description = tool_name.replace("_", " ")
            logger.warning(f"Attempted to call tool '{tool_name}' in read-only mode.")
            raise invalid_params(f"Cannot {action_description} in read-only mode.")
        return await func(arguments, context, *args, **kwargs)

    return wrapper  # type: ignore
