"""
Utility functions for the Sentry Sensei server.
"""

from .date import (
    format_sentry_date,
    parse_date,
    parse_date_ymd,
    previous_week_range,
    relative_date_range,
)
from .env import first_env, getenv, is_env_extended_truthy, is_env_truthy
from .logging import log_config_param, mask_sensitive, redact_arguments

__all__ = [
    "first_env",
    "format_sentry_date",
    "getenv",
    "is_env_extended_truthy",
    "is_env_truthy",
    "log_config_param",
    "mask_sensitive",
    "parse_date",
    "parse_date_ymd",
    "previous_week_range",
    "redact_arguments",
    "relative_date_range",
]
