"""Jira tool handlers."""

import logging

from mcp.types import CallToolResult

from ..context import ToolContext
from ..formatting.jira import format_jira_ticket_response
from ..models.arguments import (
    EditJiraTicketArguments,
    JiraTicketDetailsArguments,
    JiraTicketFieldsArguments,
)
from ..utils.decorators import check_write_access
from .base import text_result, to_json

logger = logging.getLogger("sentry-sensei.handlers.jira")


async def get_jira_ticket_details(
    arguments: JiraTicketDetailsArguments, context: ToolContext
) -> CallToolResult:
    async with context.jira_client() as client:
        ticket = await client.get_ticket_details(
            arguments.ticket_key, arguments.deep_details
        )
    logger.info(
        f"Fetched ticket {ticket['key']} with "
        f"{len(ticket['recentComments'])} recent comments"
    )
    return text_result(format_jira_ticket_response(ticket))


async def get_jira_ticket_fields(
    arguments: JiraTicketFieldsArguments, context: ToolContext
) -> CallToolResult:
    async with context.jira_client() as client:
        fields_info = await client.get_issue_fields_for_ticket(
            arguments.ticket_key,
            arguments.show_only_editable,
            arguments.include_custom_fields,
            arguments.fields,
        )

    counts = fields_info["fieldCount"]
    header = (
        f"Fields for {fields_info['ticketKey']}: {fields_info['ticketSummary']}\n"
        f"Essential: {counts['essential']}, Custom/other: {counts['custom']}, "
        f"Total editable: {counts['total']}"
    )
    return text_result(f"{header}\n\n{to_json(fields_info)}")


@check_write_access
async def edit_jira_ticket(
    arguments: EditJiraTicketArguments, context: ToolContext
) -> CallToolResult:
    async with context.jira_client() as client:
        outcome = await client.edit_ticket(arguments.ticket_key, arguments.fields)
    logger.info(outcome["message"])
    return text_result(f"{outcome['message']}\n\n{to_json(outcome)}")
