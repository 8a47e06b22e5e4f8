from .client import SentryClient
from .query import IssueSearchOptions, build_issue_params, build_issue_query

__all__ = [
    "IssueSearchOptions",
    "SentryClient",
    "build_issue_params",
    "build_issue_query",
]
