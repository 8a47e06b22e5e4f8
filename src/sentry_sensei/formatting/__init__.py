"""Pure formatters that compress upstream payloads into bounded summaries."""

from .adf import extract_text, text_to_adf
from .jira import format_jira_response, format_jira_ticket_response
from .policy import DEFAULT_POLICY, Caps, FormatPolicy
from .sentry import (
    format_issue_details,
    format_issues_list,
    format_organizations_list,
    format_projects_list,
    issue_to_markdown,
)

__all__ = [
    "Caps",
    "DEFAULT_POLICY",
    "FormatPolicy",
    "extract_text",
    "format_issue_details",
    "format_issues_list",
    "format_jira_response",
    "format_jira_ticket_response",
    "format_organizations_list",
    "format_projects_list",
    "issue_to_markdown",
    "text_to_adf",
]
