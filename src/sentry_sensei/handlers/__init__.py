"""Tool handlers. Each one talks to at most one upstream service."""

from .datetime import get_current_datetime
from .jira import edit_jira_ticket, get_jira_ticket_details, get_jira_ticket_fields
from .sentry import (
    get_sentry_issue_details,
    get_sentry_issues,
    get_sentry_organizations,
    get_sentry_projects,
)

__all__ = [
    "edit_jira_ticket",
    "get_current_datetime",
    "get_jira_ticket_details",
    "get_jira_ticket_fields",
    "get_sentry_issue_details",
    "get_sentry_issues",
    "get_sentry_organizations",
    "get_sentry_projects",
]
