"""Per-request credential resolution.

Each field is taken from the first non-empty source: request header,
startup configuration (environment and CLI), then a stored OAuth token.
Nothing is validated here; upstream clients report missing values when
they are constructed.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import keyring
from keyring.errors import KeyringError

from .config import CredentialDefaults, ServerConfig

logger = logging.getLogger("sentry-sensei.credentials")

KEYRING_SERVICE_NAME = "sentry-sensei-mcp"

SENTRY_HOST_HEADER = "X-Sentry-Host"
SENTRY_ORGANIZATION_HEADER = "X-Sentry-Organization"
SENTRY_TOKEN_HEADER = "X-Sentry-Token"
ATLASSIAN_DOMAIN_HEADER = "X-Atlassian-Domain"
JIRA_TOKEN_HEADER = "X-Jira-Token"
JIRA_EMAIL_HEADER = "X-Jira-Email"

CREDENTIAL_HEADERS = (
    SENTRY_HOST_HEADER,
    SENTRY_ORGANIZATION_HEADER,
    SENTRY_TOKEN_HEADER,
    ATLASSIAN_DOMAIN_HEADER,
    JIRA_TOKEN_HEADER,
    JIRA_EMAIL_HEADER,
)


@dataclass(frozen=True)
class SentryCredentials:
    host: str | None = None
    organization: str | None = None
    token: str | None = None


@dataclass(frozen=True)
class JiraCredentials:
    domain: str | None = None
    token: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class Credentials:
    """Credentials for both upstream services, possibly partial."""

    sentry: SentryCredentials = field(default_factory=SentryCredentials)
    jira: JiraCredentials = field(default_factory=JiraCredentials)


class TokenStore(Protocol):
    """Source of previously stored OAuth access tokens."""

    def get_access_token(self, service: str) -> str | None: ...


class StoredTokenProvider:
    """Reads OAuth tokens saved by an external login flow.

    Tokens are looked up in the system keyring first and then in
    ``<token_dir>/oauth-<service>.json``.
    """

    def __init__(self, token_dir: Path) -> None:
        self.token_dir = token_dir

    def get_access_token(self, service: str) -> str | None:
        token_data = self._load_from_keyring(service) or self._load_from_file(service)
        token = token_data.get("access_token")
        return str(token) if token else None

    @staticmethod
    def _load_from_keyring(service: str) -> dict[str, Any]:
        try:
            token_json = keyring.get_password(KEYRING_SERVICE_NAME, f"oauth-{service}")
        except KeyringError as e:
            logger.debug(f"Keyring unavailable for {service} tokens: {e}")
            return {}
        if not token_json:
            return {}
        try:
            return json.loads(token_json)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring malformed {service} token data in keyring")
            return {}

    def _load_from_file(self, service: str) -> dict[str, Any]:
        token_path = self.token_dir / f"oauth-{service}.json"
        if not token_path.exists():
            return {}
        try:
            with open(token_path) as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load {service} tokens from {token_path}: {e}")
            return {}


def header_value(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup returning None for blank values."""
    if not headers:
        return None
    target = name.lower()
    for key, value in headers.items():
        if key.lower() == target:
            value = value.strip() if isinstance(value, str) else value
            return value or None
    return None


def _first(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def resolve_credentials(
    headers: Mapping[str, str] | None,
    defaults: CredentialDefaults | ServerConfig | None = None,
    token_store: TokenStore | None = None,
) -> Credentials:
    """
    Build the credentials for one request.

    Args:
        headers: Request headers (any casing), empty for stdio
        defaults: Values from the environment and CLI, or a ServerConfig
            carrying them
        token_store: Optional stored-token source consulted last for tokens

    Returns:
        Credentials with whatever could be resolved
    """
    if isinstance(defaults, ServerConfig):
        defaults = defaults.credentials
    defaults = defaults or CredentialDefaults()

    sentry_token = _first(
        header_value(headers, SENTRY_TOKEN_HEADER), defaults.sentry_token
    )
    if not sentry_token and token_store is not None:
        sentry_token = token_store.get_access_token("sentry")

    jira_token = _first(header_value(headers, JIRA_TOKEN_HEADER), defaults.jira_token)
    if not jira_token and token_store is not None:
        jira_token = token_store.get_access_token("jira")

    return Credentials(
        sentry=SentryCredentials(
            host=_first(header_value(headers, SENTRY_HOST_HEADER), defaults.sentry_host),
            organization=_first(
                header_value(headers, SENTRY_ORGANIZATION_HEADER),
                defaults.sentry_organization,
            ),
            token=sentry_token,
        ),
        jira=JiraCredentials(
            domain=_first(
                header_value(headers, ATLASSIAN_DOMAIN_HEADER), defaults.atlassian_domain
            ),
            token=jira_token,
            email=_first(header_value(headers, JIRA_EMAIL_HEADER), defaults.jira_email),
        ),
    )
