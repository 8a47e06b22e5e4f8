"""Logging helpers for masking secrets."""

import logging
from collections.abc import Mapping
from typing import Any

SENSITIVE_KEY_FRAGMENTS = ("token", "secret", "password", "authorization", "apikey")


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Mask a secret, keeping only a few characters at each end.

    Args:
        value: The secret to mask
        keep_chars: Number of characters to keep at the start and end

    Returns:
        Masked string, or "Not Provided" for empty values
    """
    if not value:
        return "Not Provided"
    if len(value) <= keep_chars * 2:
        return "*" * len(value)
    return f"{value[:keep_chars]}{'*' * (len(value) - keep_chars * 2)}{value[-keep_chars:]}"


def is_sensitive_key(key: str) -> bool:
    normalized = key.lower().replace("-", "").replace("_", "")
    return any(fragment in normalized for fragment in SENSITIVE_KEY_FRAGMENTS)


def redact_arguments(arguments: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of tool arguments with secret-looking values masked."""
    if not arguments:
        return {}
    redacted: dict[str, Any] = {}
    for key, value in arguments.items():
        if is_sensitive_key(key):
            redacted[key] = mask_sensitive(str(value) if value is not None else None)
        elif isinstance(value, Mapping):
            redacted[key] = redact_arguments(value)
        else:
            redacted[key] = value
    return redacted


def log_config_param(
    logger: logging.Logger,
    service: str,
    param: str,
    value: str | None,
    sensitive: bool = False,
) -> None:
    """Log a configuration parameter, masking it when sensitive."""
    display_value = mask_sensitive(value) if sensitive else (value or "Not Provided")
    logger.info(f"{service} {param}: {display_value}")
