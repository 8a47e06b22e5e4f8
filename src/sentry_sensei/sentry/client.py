"""Sentry REST API client."""

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from ..config import DEFAULT_SENTRY_HOST, SENTRY_TIMEOUT
from ..credentials import (
    SENTRY_ORGANIZATION_HEADER,
    SENTRY_TOKEN_HEADER,
    SentryCredentials,
)
from ..exceptions import MissingCredentialError
from ..utils.decorators import handle_upstream_errors
from .query import IssueSearchOptions, build_issue_params

logger = logging.getLogger("sentry-sensei.sentry")

SERVICE_NAME = "Sentry"
API_PATH = "/api/0"
TAG_VALUE_LIMIT = 10


def normalize_host(host: str | None) -> str:
    """Accept ``sentry.io`` or ``https://sentry.io/`` and return a base URL."""
    host = (host or DEFAULT_SENTRY_HOST).strip().rstrip("/")
    if not host.startswith(("http://", "https://")):
        host = f"https://{host}"
    return host


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class SentryClient:
    """Async client for the Sentry API, built per request.

    Raises:
        MissingCredentialError: If no token was resolved
    """

    def __init__(
        self,
        credentials: SentryCredentials,
        timeout: float = SENTRY_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not credentials.token:
            raise MissingCredentialError(
                SERVICE_NAME, "API token", SENTRY_TOKEN_HEADER, "SENTRY_TOKEN"
            )

        self.credentials = credentials
        self.base_url = f"{normalize_host(credentials.host)}{API_PATH}"
        self.timeout = timeout
        self.session = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {credentials.token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SentryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.session.aclose()

    def require_organization(self, organization: str | None = None) -> str:
        """Organization from the call, else from the resolved credentials."""
        organization = organization or self.credentials.organization
        if not organization:
            raise MissingCredentialError(
                SERVICE_NAME,
                "organization",
                SENTRY_ORGANIZATION_HEADER,
                "SENTRY_ORG",
            )
        return organization

    @handle_upstream_errors(SERVICE_NAME)
    async def _get_json(
        self,
        path: str,
        params: list[tuple[str, str]] | dict[str, Any] | None = None,
        *,
        operation: str,
    ) -> Any:
        logger.debug(f"{operation}: GET {self.base_url}{path}")
        response = await self.session.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def get_organizations(self) -> list[dict[str, Any]]:
        """GET /api/0/organizations/"""
        return await self._get_json("/organizations/", operation="Fetching organizations")

    async def get_projects(self, organization: str | None = None) -> list[dict[str, Any]]:
        """Projects of one organization, or every accessible project."""
        if organization:
            path = f"/organizations/{_segment(organization)}/projects/"
        else:
            path = "/projects/"
        return await self._get_json(path, operation="Fetching projects")

    async def get_issues(
        self,
        organization: str,
        options: IssueSearchOptions | None = None,
        now: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Search issues in an organization.

        Args:
            organization: Organization slug
            options: Search filters
            now: Reference instant for the default date range

        Returns:
            Raw issue list
        """
        params = build_issue_params(options or IssueSearchOptions(), now)
        return await self._get_json(
            f"/organizations/{_segment(organization)}/issues/",
            params,
            operation="Fetching issues",
        )

    async def get_issue_details(
        self, organization: str, issue_id: int | str
    ) -> dict[str, Any]:
        return await self._get_json(
            f"/organizations/{_segment(organization)}/issues/{_segment(issue_id)}/",
            operation=f"Fetching issue {issue_id}",
        )

    async def get_latest_event_for_issue(
        self, organization: str, issue_id: int | str
    ) -> dict[str, Any]:
        return await self._get_json(
            f"/organizations/{_segment(organization)}/issues/"
            f"{_segment(issue_id)}/events/latest/",
            operation=f"Fetching latest event for issue {issue_id}",
        )

    async def get_issue_tags(
        self,
        organization: str,
        issue_id: int | str,
        environment: str | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"limit": TAG_VALUE_LIMIT, "readable": "true"}
        if environment:
            params["environment"] = environment
        return await self._get_json(
            f"/organizations/{_segment(organization)}/issues/{_segment(issue_id)}/tags/",
            params,
            operation=f"Fetching tags for issue {issue_id}",
        )
