"""
Typed tool arguments.

Incoming ``params.arguments`` are decoded into these models once, at the
processor boundary. The advertised ``inputSchema`` of every tool is
generated from the same models, so schema and validation cannot drift.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SENTRY_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(Z|(\.\d{3}Z?)?)?$"

ProjectId = Annotated[str, Field(pattern=r"^\d+$")]
Environment = Annotated[str, Field(min_length=1)]
SentryDate = Annotated[str, Field(pattern=SENTRY_DATE_PATTERN)]


class ToolArguments(BaseModel):
    """Base for tool arguments: camelCase on the wire, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    model: str | None = Field(
        default=None,
        description="Identifier of the model issuing the call, used for logging only",
    )


class SentryOrganizationsArguments(ToolArguments):
    pass


class SentryProjectsArguments(ToolArguments):
    organization: str | None = Field(
        default=None,
        description="Organization slug; defaults to the configured organization",
    )


class SentryIssuesArguments(ToolArguments):
    organization: str | None = Field(
        default=None,
        description="Organization slug; defaults to the configured organization",
    )
    project: ProjectId | list[ProjectId] | None = Field(
        default=None, description="Numeric project id or list of ids"
    )
    environment: Environment | list[Environment] | None = Field(
        default=None, description="Environment name or list of names"
    )
    utc: bool = Field(default=True, description="Interpret dates as UTC")
    sort_by: Literal["date", "freq", "inbox", "new", "trends", "user"] = Field(
        default="freq", description="Sort order"
    )
    issue: str | None = Field(default=None, description="Restrict to one issue short id")
    exclude_error_type: str | None = Field(
        default=None, description="Error type to exclude, e.g. ChunkLoadError"
    )
    error_message: str | None = Field(
        default=None, description="Only issues whose message contains this text"
    )
    limit: int = Field(default=10, ge=1, le=100, description="Maximum issues returned")
    stats_period: str | None = Field(
        default=None,
        description="Relative period such as 24h or 14d; overrides dateFrom/dateTo",
    )
    date_from: SentryDate | None = Field(
        default=None, description="Start, YYYY-MM-DDTHH:MM:SS; defaults to last Monday"
    )
    date_to: SentryDate | None = Field(
        default=None, description="End, YYYY-MM-DDTHH:MM:SS; defaults to last Sunday"
    )
    group_stats_period: Literal["14d", "24h", "auto"] | None = Field(
        default=None, description="Resolution of the per-issue stats"
    )
    query: str | None = Field(
        default=None,
        description="Raw Sentry search query; replaces the default is:unresolved",
    )
    collapse: list[Literal["base", "filtered", "lifetime", "stats", "unhandled"]] | None = (
        Field(default=None, description="Response sections to omit")
    )
    expand: list[str] | None = Field(
        default=None, description="Additional response sections to include"
    )
    cursor: str | None = Field(default=None, description="Pagination cursor")
    relative_days: int | None = Field(
        default=None,
        ge=1,
        le=365,
        description="Look back N days from today; ignored when statsPeriod is set",
    )


class SentryIssueDetailsArguments(ToolArguments):
    organization: str | None = Field(
        default=None,
        description="Organization slug; defaults to the configured organization",
    )
    issue_id: int = Field(gt=0, description="Numeric Sentry issue id")
    include_tags: bool = Field(default=False, description="Fetch the tag breakdown")
    environment: Environment | None = Field(
        default=None, description="Restrict tag statistics to one environment"
    )
    trace: bool = Field(default=True, description="Fetch the latest stack trace")
    deep_details: bool = Field(
        default=False,
        description="Include extended fields, tags and trace with wider limits",
    )


class JiraTicketDetailsArguments(ToolArguments):
    ticket_key: str = Field(min_length=1, description="Ticket key, e.g. PROJ-123")
    deep_details: bool = Field(
        default=False, description="More comments and longer text"
    )


class JiraTicketFieldsArguments(ToolArguments):
    ticket_key: str = Field(min_length=1, description="Ticket key, e.g. PROJ-123")
    show_only_editable: bool = Field(
        default=True, description="Only list fields the caller can edit"
    )
    include_custom_fields: bool = Field(
        default=True, description="List custom fields after the essential ones"
    )
    fields: list[str] | None = Field(
        default=None, description="Restrict to these field keys or names"
    )


class EditJiraTicketArguments(ToolArguments):
    ticket_key: str = Field(min_length=1, description="Ticket key, e.g. PROJ-123")
    fields: dict[str, Any] = Field(
        min_length=1,
        description=(
            "Field key or name to new value. Text for description and other "
            "rich-text fields may contain '-' bullet lines"
        ),
    )


class CurrentDatetimeArguments(ToolArguments):
    format: Literal["iso", "readable", "unix"] = Field(
        default="iso", description="Output format of the primary value"
    )
    timezone: str | None = Field(
        default=None, description="IANA timezone such as Europe/Berlin; UTC by default"
    )
