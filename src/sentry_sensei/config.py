"""Server configuration assembled once at startup."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from . import __version__
from .formatting.policy import DEFAULT_POLICY, FormatPolicy
from .utils.env import first_env, getenv, is_env_extended_truthy

SERVER_NAME = "sentry-sensei-mcp"
DEFAULT_SENTRY_HOST = "https://sentry.io"
SENTRY_TIMEOUT = 30.0
JIRA_TIMEOUT = 15.0
DEFAULT_TOKEN_DIR = Path.home() / ".sentry-sensei"


@dataclass(frozen=True)
class CredentialDefaults:
    """Credential values coming from the environment or the command line."""

    sentry_host: str | None = None
    sentry_organization: str | None = None
    sentry_token: str | None = None
    atlassian_domain: str | None = None
    jira_token: str | None = None
    jira_email: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "CredentialDefaults":
        env = env or {}
        return cls(
            sentry_host=first_env(env, "SENTRY_HOST"),
            sentry_organization=first_env(env, "SENTRY_ORG", "SENTRY_ORGANIZATION"),
            sentry_token=first_env(env, "SENTRY_TOKEN"),
            atlassian_domain=first_env(env, "ATLASSIAN_DOMAIN"),
            jira_token=first_env(env, "JIRA_TOKEN", "JIRA_ACCESS_TOKEN"),
            jira_email=first_env(env, "JIRA_EMAIL", "JIRA_USER_EMAIL"),
        )

    def merged(self, **overrides: str | None) -> "CredentialDefaults":
        """Return a copy where non-empty overrides win."""
        values = {key: value for key, value in overrides.items() if value}
        return replace(self, **values)


@dataclass(frozen=True)
class ServerConfig:
    """Everything the processor and handlers need from the environment.

    Components receive this object instead of reading ``os.environ``.
    """

    name: str = SERVER_NAME
    version: str = __version__
    production: bool = True
    read_only: bool = False
    enabled_tools: frozenset[str] | None = None
    credentials: CredentialDefaults = field(default_factory=CredentialDefaults)
    format_policy: FormatPolicy = DEFAULT_POLICY
    sentry_timeout: float = SENTRY_TIMEOUT
    jira_timeout: float = JIRA_TIMEOUT
    host: str = "127.0.0.1"
    port: int = 8000
    token_dir: Path = DEFAULT_TOKEN_DIR

    @property
    def debug_errors(self) -> bool:
        """Whether internal error details may be attached to responses."""
        return not self.production

    @classmethod
    def from_env(
        cls, env: Mapping[str, str] | None = None, **overrides: Any
    ) -> "ServerConfig":
        """
        Create configuration from environment variables.

        Args:
            env: Optional mapping consulted before ``os.environ``
            **overrides: Field values (typically from CLI options) that win
                over the environment when not None

        Returns:
            ServerConfig instance
        """
        env = env or {}
        mode = (
            getenv(env, "SENSEI_ENV") or getenv(env, "NODE_ENV") or "production"
        ).lower()

        enabled = getenv(env, "ENABLED_TOOLS")
        enabled_tools = (
            frozenset(name.strip() for name in enabled.split(",") if name.strip())
            if enabled
            else None
        )

        config = cls(
            production=mode != "development",
            read_only=is_env_extended_truthy("READ_ONLY_MODE", "false", env),
            enabled_tools=enabled_tools,
            credentials=CredentialDefaults.from_env(env),
            sentry_timeout=float(getenv(env, "SENTRY_TIMEOUT") or SENTRY_TIMEOUT),
            jira_timeout=float(getenv(env, "JIRA_TIMEOUT") or JIRA_TIMEOUT),
            host=getenv(env, "HOST") or "127.0.0.1",
            port=int(getenv(env, "PORT") or 8000),
            token_dir=Path(
                getenv(env, "SENSEI_TOKEN_DIR") or os.fspath(DEFAULT_TOKEN_DIR)
            ),
        )

        credential_overrides = overrides.pop("credentials", None)
        if credential_overrides:
            config = replace(
                config, credentials=config.credentials.merged(**credential_overrides)
            )
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(config, **values) if values else config
