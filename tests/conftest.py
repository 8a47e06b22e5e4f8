"""
Root pytest configuration file for Sentry Sensei tests.

Provides the session-wide fixtures shared by all test modules: the
anyio backend, server configurations and a recording HTTP transport.
"""

import pytest

from sentry_sensei.config import CredentialDefaults, ServerConfig
from tests.utils.mocks import RecordingTransport


@pytest.fixture
def anyio_backend():
    # The Jira client uses asyncio.gather
    return "asyncio"


@pytest.fixture
def credential_defaults() -> CredentialDefaults:
    return CredentialDefaults(
        sentry_host="https://sentry.example.com",
        sentry_organization="acme",
        sentry_token="sentry-token-123",
        atlassian_domain="acme.atlassian.net",
        jira_token="jira-token-456",
        jira_email="dev@acme.test",
    )


@pytest.fixture
def server_config(credential_defaults) -> ServerConfig:
    """Production configuration with every credential set."""
    return ServerConfig(credentials=credential_defaults)


@pytest.fixture
def bare_config() -> ServerConfig:
    """Configuration without any credentials."""
    return ServerConfig()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
