"""Environment variable utility functions for Sentry Sensei."""

import os
from collections.abc import Mapping


def is_env_truthy(env_var_name: str, default: str = "") -> bool:
    """Check if environment variable is set to a standard truthy value.

    Considers 'true', '1', 'yes' as truthy values (case-insensitive).

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to a truthy value, False otherwise
    """
    return os.getenv(env_var_name, default).lower() in ("true", "1", "yes")


def is_env_extended_truthy(
    env_var_name: str, default: str = "", env: Mapping[str, str] | None = None
) -> bool:
    """Check if environment variable is set to an extended truthy value.

    Considers 'true', '1', 'yes', 'y', 'on' as truthy values (case-insensitive).
    Used for READ_ONLY_MODE and similar flags.
    """
    value = getenv(env or {}, env_var_name, default) or ""
    return value.lower() in ("true", "1", "yes", "y", "on")


def getenv(
    env: Mapping[str, str], env_var_name: str, default: str | None = None
) -> str | None:
    """Retrieve the value of an environment variable.

    Checks the provided `env` mapping first, then the process environment.

    Args:
        env: Mapping of overriding variables.
        env_var_name: The name of the environment variable to retrieve.
        default: Value returned when the variable is set nowhere.

    Returns:
        The value of the environment variable if found, otherwise `default`.
    """
    return env.get(env_var_name, os.getenv(env_var_name, default))


def first_env(env: Mapping[str, str], *names: str) -> str | None:
    """Return the first non-empty value among several variable names."""
    for name in names:
        value = getenv(env, name)
        if value:
            return value
    return None
