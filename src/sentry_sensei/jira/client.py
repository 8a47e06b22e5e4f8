"""Jira Cloud REST API (v3) client."""

import asyncio
import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..config import JIRA_TIMEOUT
from ..credentials import (
    ATLASSIAN_DOMAIN_HEADER,
    JIRA_EMAIL_HEADER,
    JIRA_TOKEN_HEADER,
    JiraCredentials,
)
from ..exceptions import MissingCredentialError, invalid_params
from ..formatting.jira import format_jira_response
from ..formatting.policy import DEFAULT_POLICY, FormatPolicy
from ..utils.decorators import handle_upstream_errors
from .fields import (
    build_field_mappings,
    find_field,
    format_field_value,
    format_fields_response,
)

logger = logging.getLogger("sentry-sensei.jira")

SERVICE_NAME = "Jira"
API_PATH = "/rest/api/3"


def normalize_domain(domain: str) -> str:
    """Reduce ``https://acme.atlassian.net/`` to ``acme.atlassian.net``."""
    domain = domain.strip()
    for prefix in ("https://", "http://"):
        if domain.startswith(prefix):
            domain = domain[len(prefix) :]
    return domain.rstrip("/")


def basic_auth_header(email: str, token: str) -> str:
    encoded = base64.b64encode(f"{email}:{token}".encode()).decode("ascii")
    return f"Basic {encoded}"


class JiraClient:
    """Async Jira client, built per request.

    The field-id mapping is fetched at most once per instance.

    Raises:
        MissingCredentialError: If domain, email or token was not resolved
    """

    def __init__(
        self,
        credentials: JiraCredentials,
        timeout: float = JIRA_TIMEOUT,
        policy: FormatPolicy = DEFAULT_POLICY,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not credentials.domain:
            raise MissingCredentialError(
                SERVICE_NAME, "Atlassian domain", ATLASSIAN_DOMAIN_HEADER, "ATLASSIAN_DOMAIN"
            )
        if not credentials.email:
            raise MissingCredentialError(
                SERVICE_NAME, "user email", JIRA_EMAIL_HEADER, "JIRA_EMAIL"
            )
        if not credentials.token:
            raise MissingCredentialError(
                SERVICE_NAME, "API token", JIRA_TOKEN_HEADER, "JIRA_TOKEN"
            )

        self.domain = normalize_domain(credentials.domain)
        self.base_url = f"https://{self.domain}{API_PATH}"
        self.timeout = timeout
        self.policy = policy
        self._field_mappings: dict[str, dict[str, Any]] | None = None
        self.session = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": basic_auth_header(credentials.email, credentials.token),
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.session.aclose()

    @handle_upstream_errors(SERVICE_NAME)
    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        *,
        operation: str,
    ) -> Any:
        logger.debug(f"{operation}: {method} {self.base_url}{path}")
        response = await self.session.request(method, path, json=json)
        response.raise_for_status()
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _issue_path(ticket_key: str, suffix: str = "") -> str:
        return f"/issue/{quote(ticket_key, safe='')}{suffix}"

    async def get_issue_fields(self) -> list[dict[str, Any]]:
        """GET /rest/api/3/field"""
        return await self._request("GET", "/field", operation="Fetching field metadata")

    async def get_field_mappings(self) -> dict[str, dict[str, Any]]:
        """Field id to ``{name, key, custom, schema}``, memoized per instance."""
        if self._field_mappings is None:
            self._field_mappings = build_field_mappings(await self.get_issue_fields())
        return self._field_mappings

    async def get_ticket_details(
        self, ticket_key: str, deep_details: bool = False
    ) -> dict[str, Any]:
        """
        Fetch and format one ticket.

        Field mappings only name custom fields; if they cannot be fetched
        the ticket is returned without them.
        """
        issue = await self._request(
            "GET", self._issue_path(ticket_key), operation=f"Fetching ticket {ticket_key}"
        )

        field_mappings: dict[str, dict[str, Any]] = {}
        try:
            field_mappings = await self.get_field_mappings()
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Could not load field mappings, proceeding without them: {e}")

        return format_jira_response(
            issue, self.domain, deep_details, field_mappings, self.policy
        )

    async def get_issue_fields_for_ticket(
        self,
        ticket_key: str,
        show_only_editable: bool = True,
        include_custom_fields: bool = True,
        specific_fields: list[str] | None = None,
    ) -> dict[str, Any]:
        """Describe a ticket's fields with current values and allowed options."""
        issue, edit_meta = await asyncio.gather(
            self._request(
                "GET",
                self._issue_path(ticket_key),
                operation=f"Fetching ticket {ticket_key}",
            ),
            self._request(
                "GET",
                self._issue_path(ticket_key, "/editmeta"),
                operation=f"Fetching edit metadata for {ticket_key}",
            ),
        )

        field_mappings: dict[str, dict[str, Any]] = {}
        try:
            field_mappings = await self.get_field_mappings()
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Could not load field mappings, proceeding without them: {e}")

        return format_fields_response(
            issue,
            edit_meta or {},
            field_mappings,
            show_only_editable,
            include_custom_fields,
            specific_fields,
        )

    async def edit_ticket(
        self, ticket_key: str, update_fields: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Update the given fields of a ticket.

        Unknown fields are skipped and reported.

        Raises:
            McpError: If none of the requested fields can be edited
        """
        fields_info = await self.get_issue_fields_for_ticket(ticket_key, True, True)

        valid_fields: dict[str, Any] = {}
        skipped_fields: list[str] = []
        for name, value in update_fields.items():
            field_info = find_field(fields_info, name)
            if field_info is None:
                skipped_fields.append(name)
                continue
            valid_fields[field_info["key"]] = format_field_value(value, field_info)

        if not valid_fields:
            available = ", ".join(f["name"] for f in fields_info["essentialFields"])
            raise invalid_params(
                f"No valid fields found to update. Available fields: {available}"
            )

        await self._request(
            "PUT",
            self._issue_path(ticket_key),
            json={"fields": valid_fields},
            operation=f"Updating ticket {ticket_key}",
        )

        message = f"Successfully updated {len(valid_fields)} field(s)."
        if skipped_fields:
            message += (
                f" Skipped {len(skipped_fields)} invalid field(s): "
                f"{', '.join(skipped_fields)}"
            )
        return {
            "success": True,
            "ticketKey": ticket_key,
            "updatedFields": list(valid_fields),
            "skippedFields": skipped_fields,
            "message": message,
        }
