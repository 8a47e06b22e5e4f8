"""Sentry tool handlers."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mcp.types import CallToolResult

from ..context import ToolContext
from ..formatting.sentry import (
    format_issue_details,
    format_issues_list,
    format_organizations_list,
    format_projects_list,
    issue_to_markdown,
)
from ..models.arguments import (
    SentryIssueDetailsArguments,
    SentryIssuesArguments,
    SentryOrganizationsArguments,
    SentryProjectsArguments,
)
from ..sentry.query import IssueSearchOptions, as_list
from ..utils import date as date_utils
from .base import text_result, to_json

logger = logging.getLogger("sentry-sensei.handlers.sentry")


def current_date_info() -> dict[str, str]:
    now = date_utils.utcnow()
    return {
        "currentDateTime": now.isoformat(timespec="seconds"),
        "timezone": "UTC",
    }


def search_options(arguments: SentryIssuesArguments) -> IssueSearchOptions:
    """Translate tool arguments into search options, resolving relativeDays."""
    date_from, date_to = arguments.date_from, arguments.date_to
    if arguments.relative_days and not arguments.stats_period:
        date_from, date_to = date_utils.relative_date_range(arguments.relative_days)
        logger.info(
            f"Using relative date range: last {arguments.relative_days} days "
            f"({date_from} to {date_to})"
        )

    return IssueSearchOptions(
        project=arguments.project,
        environment=arguments.environment,
        sort_by=arguments.sort_by,
        limit=arguments.limit,
        utc=arguments.utc,
        issue=arguments.issue,
        exclude_error_type=arguments.exclude_error_type,
        error_message=arguments.error_message,
        stats_period=arguments.stats_period,
        date_from=date_from,
        date_to=date_to,
        group_stats_period=arguments.group_stats_period,
        query=arguments.query,
        collapse=arguments.collapse,
        expand=arguments.expand,
        cursor=arguments.cursor,
    )


def query_information(
    options: IssueSearchOptions, relative_days: int | None = None
) -> list[str]:
    """Bullet lines describing the filters of an issue search."""
    date_info = current_date_info()
    lines = [
        f"Query executed on: {date_info['currentDateTime']} ({date_info['timezone']})"
    ]
    if options.project:
        lines.append(f"Project(s): {', '.join(as_list(options.project))}")
    if options.environment:
        lines.append(f"Environment(s): {', '.join(as_list(options.environment))}")
    if options.exclude_error_type:
        lines.append(f"Excluding Error Type: {options.exclude_error_type}")
    if options.error_message:
        lines.append(f"Error Message: {options.error_message}")
    if options.stats_period:
        lines.append(f"Stats Period: {options.stats_period}")
    elif options.date_from and options.date_to:
        lines.append(f"Date Range: {options.date_from} to {options.date_to}")
    if relative_days and not options.stats_period:
        lines.append(f"Relative Period: Last {relative_days} days from today")
    if options.limit:
        lines.append(f"Limit: {options.limit}")
    return lines


def jira_link_summary(issues: Sequence[Mapping[str, Any]]) -> str:
    linked = [issue for issue in issues if issue.get("annotations")]
    if not linked:
        return "**JIRA Links:** None of the issues have linked JIRA tickets."

    lines = [f"**Issues with JIRA Links ({len(linked)}/{len(issues)}):**"]
    for issue in linked:
        lines.append(f"- {issue.get('shortId') or issue.get('id')}: {issue.get('title')}")
        for annotation in issue["annotations"]:
            lines.append(f"  → {annotation.get('displayName')}: {annotation.get('url')}")
    return "\n".join(lines)


async def get_sentry_organizations(
    arguments: SentryOrganizationsArguments, context: ToolContext
) -> CallToolResult:
    async with context.sentry_client() as client:
        organizations = await client.get_organizations()
    logger.info(f"Found {len(organizations)} organizations")
    return text_result(to_json(format_organizations_list(organizations)))


async def get_sentry_projects(
    arguments: SentryProjectsArguments, context: ToolContext
) -> CallToolResult:
    organization = arguments.organization or context.credentials.sentry.organization
    async with context.sentry_client() as client:
        projects = await client.get_projects(organization)
    logger.info(f"Found {len(projects)} projects")
    return text_result(to_json(format_projects_list(projects)))


async def get_sentry_issues(
    arguments: SentryIssuesArguments, context: ToolContext
) -> CallToolResult:
    """Search issues and summarize the filters and linked tickets."""
    options = search_options(arguments)
    async with context.sentry_client() as client:
        organization = client.require_organization(arguments.organization)
        issues = await client.get_issues(organization, options)
    logger.info(f"Found {len(issues)} issues")

    policy = context.config.format_policy
    filters = query_information(options, arguments.relative_days)
    sections = [f'Found {len(issues)} issues in organization "{organization}":']
    if len(filters) > 1:
        sections.append(
            "**Query Information:**\n" + "\n".join(f"- {line}" for line in filters)
        )
    sections.append(jira_link_summary(issues))
    sections.append("**Issues:**\n" + to_json(format_issues_list(issues, policy)))
    return text_result("\n\n".join(sections))


async def get_sentry_issue_details(
    arguments: SentryIssueDetailsArguments, context: ToolContext
) -> CallToolResult:
    """
    Fetch one issue, optionally enriched with tags and the latest event.

    Enrichment failures are logged and the issue is returned without them.
    """
    issue_id = arguments.issue_id
    deep = arguments.deep_details

    async with context.sentry_client() as client:
        organization = client.require_organization(arguments.organization)
        issue = await client.get_issue_details(organization, issue_id)

        tags = None
        if arguments.include_tags or deep:
            try:
                tags = await client.get_issue_tags(
                    organization, issue_id, arguments.environment
                )
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Could not fetch tags for issue {issue_id}: {e}")

        latest_event = None
        if arguments.trace or deep:
            try:
                latest_event = await client.get_latest_event_for_issue(
                    organization, issue_id
                )
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Could not fetch latest event for issue {issue_id}: {e}")

    formatted = format_issue_details(
        issue, tags, latest_event, deep, context.config.format_policy
    )
    markdown = issue_to_markdown(formatted, current_date_info())
    return text_result(f"{markdown}\n\n**Detailed Information:**\n{to_json(formatted)}")
