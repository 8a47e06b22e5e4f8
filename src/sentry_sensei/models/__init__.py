from .arguments import (
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

__all__ = [
    "CurrentDatetimeArguments",
    "EditJiraTicketArguments",
    "JiraTicketDetailsArguments",
    "JiraTicketFieldsArguments",
    "SentryIssueDetailsArguments",
    "SentryIssuesArguments",
    "SentryOrganizationsArguments",
    "SentryProjectsArguments",
    "ToolArguments",
]
