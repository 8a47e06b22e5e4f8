"""
Tool catalog.

Every tool is declared once here with its description, argument model,
handler and owning service. The table is built at import time and is
never modified afterwards.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from mcp.types import CallToolResult, Tool

from .. import handlers
from ..models.arguments import (
    CurrentDatetimeArguments,
    EditJiraTicketArguments,
    JiraTicketDetailsArguments,
    JiraTicketFieldsArguments,
    SentryIssueDetailsArguments,
    SentryIssuesArguments,
    SentryOrganizationsArguments,
    SentryProjectsArguments,
    ToolArguments,
)

Handler = Callable[[Any, Any], Awaitable[CallToolResult]]


class ToolName(str, Enum):
    GET_SENTRY_ORGANIZATIONS = "get_sentry_organizations"
    GET_SENTRY_PROJECTS = "get_sentry_projects"
    GET_SENTRY_ISSUES = "get_sentry_issues"
    GET_SENTRY_ISSUE_DETAILS = "get_sentry_issue_details"
    GET_JIRA_TICKET_DETAILS = "get_jira_ticket_details"
    GET_JIRA_TICKET_FIELDS = "get_jira_ticket_fields"
    EDIT_JIRA_TICKET = "edit_jira_ticket"
    GET_CURRENT_DATETIME = "get_current_datetime"


@dataclass(frozen=True)
class ToolDefinition:
    name: ToolName
    description: str
    arguments_model: type[ToolArguments]
    handler: Handler
    service: str | None = None
    writes: bool = False

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.arguments_model.model_json_schema(by_alias=True)

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name.value,
            description=self.description,
            inputSchema=self.input_schema,
        )


_DEFINITIONS = (
    ToolDefinition(
        name=ToolName.GET_SENTRY_ORGANIZATIONS,
        description="List the Sentry organizations the token can access.",
        arguments_model=SentryOrganizationsArguments,
        handler=handlers.get_sentry_organizations,
        service="sentry",
    ),
    ToolDefinition(
        name=ToolName.GET_SENTRY_PROJECTS,
        description=(
            "List Sentry projects of an organization, or every accessible "
            "project when no organization is known."
        ),
        arguments_model=SentryProjectsArguments,
        handler=handlers.get_sentry_projects,
        service="sentry",
    ),
    ToolDefinition(
        name=ToolName.GET_SENTRY_ISSUES,
        description=(
            "Search Sentry issues of an organization. Defaults to unresolved "
            "issues of the previous calendar week (Monday to Sunday, UTC); use "
            "statsPeriod or relativeDays for other ranges. Reports linked JIRA "
            "tickets."
        ),
        arguments_model=SentryIssuesArguments,
        handler=handlers.get_sentry_issues,
        service="sentry",
    ),
    ToolDefinition(
        name=ToolName.GET_SENTRY_ISSUE_DETAILS,
        description=(
            "Get a compact summary of one Sentry issue with its latest stack "
            "trace, optional tag breakdown (browser, os, device, release, "
            "environment) and linked JIRA tickets."
        ),
        arguments_model=SentryIssueDetailsArguments,
        handler=handlers.get_sentry_issue_details,
        service="sentry",
    ),
    ToolDefinition(
        name=ToolName.GET_JIRA_TICKET_DETAILS,
        description=(
            "Get a JIRA ticket summary: status, people, dates, description and "
            "the most recent comments."
        ),
        arguments_model=JiraTicketDetailsArguments,
        handler=handlers.get_jira_ticket_details,
        service="jira",
    ),
    ToolDefinition(
        name=ToolName.GET_JIRA_TICKET_FIELDS,
        description=(
            "List the fields of a JIRA ticket with current values and allowed "
            "options, essential fields first."
        ),
        arguments_model=JiraTicketFieldsArguments,
        handler=handlers.get_jira_ticket_fields,
        service="jira",
    ),
    ToolDefinition(
        name=ToolName.EDIT_JIRA_TICKET,
        description=(
            "Update fields of a JIRA ticket. Unknown fields are skipped; plain "
            "text for rich-text fields is converted automatically."
        ),
        arguments_model=EditJiraTicketArguments,
        handler=handlers.edit_jira_ticket,
        service="jira",
        writes=True,
    ),
    ToolDefinition(
        name=ToolName.GET_CURRENT_DATETIME,
        description=(
            "Get the current date and time, useful before computing relative "
            "date ranges."
        ),
        arguments_model=CurrentDatetimeArguments,
        handler=handlers.get_current_datetime,
    ),
)

TOOLS: MappingProxyType[ToolName, ToolDefinition] = MappingProxyType(
    {definition.name: definition for definition in _DEFINITIONS}
)


def get_tool(name: str) -> ToolDefinition | None:
    """Look up a tool by its wire name."""
    try:
        return TOOLS[ToolName(name)]
    except ValueError:
        return None
