"""Query-string construction for the Sentry issues search endpoint."""

from dataclasses import dataclass
from datetime import datetime

from ..utils.date import previous_week_range, strip_utc_suffix

DEFAULT_QUERY = "is:unresolved"
DEFAULT_SORT = "freq"
DEFAULT_LIMIT = 10

MultiValue = str | int | list[str] | list[int] | None


@dataclass(frozen=True)
class IssueSearchOptions:
    """Filters accepted by `SentryClient.get_issues`.

    ``query`` left as None means "use the default"; any string, including
    an empty one, replaces the default entirely.
    """

    project: MultiValue = None
    environment: MultiValue = None
    sort_by: str = DEFAULT_SORT
    limit: int = DEFAULT_LIMIT
    utc: bool = True
    issue: str | None = None
    exclude_error_type: str | None = None
    error_message: str | None = None
    stats_period: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    group_stats_period: str | None = None
    query: str | None = None
    collapse: MultiValue = None
    expand: MultiValue = None
    cursor: str | None = None


def as_list(value: MultiValue) -> list[str]:
    """Normalize a scalar-or-list filter into a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def build_issue_query(options: IssueSearchOptions) -> str:
    """
    Assemble the Sentry search string.

    Examples:
        >>> build_issue_query(IssueSearchOptions(error_message="boom"))
        'is:unresolved message:"boom"'
        >>> build_issue_query(IssueSearchOptions(query="", issue="ABC-1"))
        'issue:"ABC-1"'
    """
    parts = []
    if options.query is None:
        parts.append(DEFAULT_QUERY)
    elif options.query:
        parts.append(options.query)

    if options.issue:
        parts.append(f'issue:"{options.issue}"')
    if options.exclude_error_type:
        parts.append(f'!error.type:"{options.exclude_error_type}"')
    if options.error_message:
        parts.append(f'message:"{options.error_message}"')

    return " ".join(parts)


def build_issue_params(
    options: IssueSearchOptions, now: datetime | None = None
) -> list[tuple[str, str]]:
    """
    Build the query parameters for the issues endpoint.

    Multi-valued filters become repeated parameters. ``statsPeriod`` wins
    over explicit dates; missing dates default to the previous full week.

    Args:
        options: Search filters
        now: Reference instant for the default week, the current time by default

    Returns:
        Ordered list of (name, value) pairs
    """
    params: list[tuple[str, str]] = [
        ("sort", options.sort_by or DEFAULT_SORT),
        ("limit", str(options.limit)),
        ("utc", "true" if options.utc else "false"),
    ]

    query = build_issue_query(options)
    if query.strip():
        params.append(("query", query))

    if options.stats_period:
        params.append(("statsPeriod", options.stats_period))
    else:
        start, end = options.date_from, options.date_to
        if not start or not end:
            default_start, default_end = previous_week_range(now)
            start = start or default_start
            end = end or default_end
        params.append(("start", strip_utc_suffix(start)))
        params.append(("end", strip_utc_suffix(end)))

    if options.group_stats_period:
        params.append(("groupStatsPeriod", options.group_stats_period))

    params.extend(("environment", env) for env in as_list(options.environment))
    params.extend(("project", project) for project in as_list(options.project))
    params.extend(("collapse", field) for field in as_list(options.collapse))
    params.extend(("expand", field) for field in as_list(options.expand))

    if options.cursor:
        params.append(("cursor", options.cursor))

    params.append(("shortIdLookup", "1"))
    return params
