"""Per-request state handed to tool handlers."""

from dataclasses import dataclass

import httpx

from .config import ServerConfig
from .credentials import Credentials
from .jira.client import JiraClient
from .sentry.client import SentryClient


@dataclass(frozen=True)
class ToolContext:
    """Credentials and configuration for one tool call.

    Upstream clients are only built when a handler asks for them, so a
    missing credential surfaces as an error for the tool that needs it.
    """

    credentials: Credentials
    config: ServerConfig
    transport: httpx.AsyncBaseTransport | None = None

    def sentry_client(self) -> SentryClient:
        return SentryClient(
            self.credentials.sentry,
            timeout=self.config.sentry_timeout,
            transport=self.transport,
        )

    def jira_client(self) -> JiraClient:
        return JiraClient(
            self.credentials.jira,
            timeout=self.config.jira_timeout,
            policy=self.config.format_policy,
            transport=self.transport,
        )
