"""
Jira ticket formatters.

Turns the raw ``/rest/api/3/issue/{key}`` payload into a bounded
summary and renders it as text. Only the raw payload is ever read, so
formatting is stable no matter how often it is repeated.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from ..utils.date import parse_date_ymd, parse_time_hms
from .adf import extract_text
from .policy import DEFAULT_POLICY, FormatPolicy

NO_SUMMARY = "No summary available"
NO_DESCRIPTION = "No description available"
NO_COMMENT = "No content"

# Custom fields surfaced in ticket details, matched on display name.
CUSTOM_FIELD_WHITELIST = frozenset(
    {
        "Sprint",
        "Story Points",
        "Story point estimate",
        "Epic Link",
        "Epic Name",
        "Team",
        "Acceptance Criteria",
        "Start date",
        "Flagged",
        "Severity",
        "Environment",
    }
)


def truncate(text: str, limit: int) -> str:
    return text[:limit] if len(text) > limit else text


def format_time_spent(seconds: int | None) -> str:
    """Render seconds as ``"<H>h <M>m"`` or ``"<M>m"``."""
    if not seconds:
        return "0m"
    hours, remainder = divmod(int(seconds), 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _item_label(item: Any) -> str:
    if isinstance(item, Mapping):
        if "name" in item and "state" in item:
            return f"{item['name']} ({item['state']})"
        return str(
            item.get("name")
            or item.get("value")
            or item.get("displayName")
            or item.get("key")
            or ""
        )
    return str(item)


def format_custom_field_value(value: Any, schema: Mapping[str, Any] | None) -> str | None:
    """
    Render a custom field value according to its declared schema type.

    Returns None for empty values so callers can skip them.
    """
    if value is None or value == "" or value == []:
        return None

    field_type = (schema or {}).get("type")

    if field_type == "user" and isinstance(value, Mapping):
        return value.get("displayName") or value.get("emailAddress")
    if field_type == "array" or isinstance(value, list):
        items = value if isinstance(value, list) else [value]
        labels = [label for label in (_item_label(item) for item in items) if label]
        return ", ".join(labels) or None
    if isinstance(value, Mapping):
        if value.get("type") == "doc":
            return extract_text(value) or None
        if field_type == "option":
            return value.get("value") or value.get("name")
        if field_type in ("priority", "status"):
            return value.get("name") or value.get("value")
        return value.get("value") or value.get("name") or str(value)
    return str(value)


def extract_custom_fields(
    fields: Mapping[str, Any],
    field_mappings: Mapping[str, Mapping[str, Any]] | None,
) -> list[dict[str, str]]:
    """Whitelisted custom fields as ``{id, name, value}``, in field-id order."""
    if not field_mappings:
        return []

    custom_fields = []
    for field_id in sorted(fields):
        if not field_id.startswith("customfield_"):
            continue
        mapping = field_mappings.get(field_id)
        if not mapping or mapping.get("name") not in CUSTOM_FIELD_WHITELIST:
            continue
        value = format_custom_field_value(fields[field_id], mapping.get("schema"))
        if value is None:
            continue
        custom_fields.append({"id": field_id, "name": mapping["name"], "value": value})
    return custom_fields


def get_recent_comments(
    comment_field: Mapping[str, Any] | None, count: int, max_chars: int
) -> list[dict[str, str]]:
    """
    The last ``count`` comments in chronological order.

    Args:
        comment_field: The ``fields.comment`` object of an issue
        count: How many of the most recent comments to keep
        max_chars: Body length cap

    Returns:
        List of ``{author, created, createdTime, body}``
    """
    comments: Sequence[Mapping[str, Any]] = (comment_field or {}).get("comments") or []
    recent = []
    for comment in comments[-count:] if count > 0 else []:
        created = comment.get("created")
        body = extract_text(comment.get("body")) or NO_COMMENT
        recent.append(
            {
                "author": (comment.get("author") or {}).get("displayName") or "Unknown",
                "created": parse_date_ymd(created) if created else "Unknown",
                "createdTime": parse_time_hms(created) if created else "Unknown",
                "body": truncate(body, max_chars),
            }
        )
    return recent


def format_jira_response(
    data: Mapping[str, Any],
    atlassian_domain: str,
    deep_details: bool = False,
    field_mappings: Mapping[str, Mapping[str, Any]] | None = None,
    policy: FormatPolicy = DEFAULT_POLICY,
) -> dict[str, Any]:
    """
    Compact a raw Jira issue.

    Args:
        data: Raw issue payload
        atlassian_domain: Site domain used to build the browse URL
        deep_details: Use the deep caps
        field_mappings: Field id to metadata, used to name custom fields
        policy: Truncation caps

    Returns:
        Formatted ticket dict
    """
    fields: Mapping[str, Any] = data.get("fields") or {}
    caps = policy.caps(deep_details)

    description = extract_text(fields.get("description")) or NO_DESCRIPTION
    created = fields.get("created")
    updated = fields.get("updated")

    formatted: dict[str, Any] = {
        "key": data.get("key"),
        "summary": fields.get("summary") or NO_SUMMARY,
        "description": truncate(description, caps.description_chars),
        "status": (fields.get("status") or {}).get("name") or "Unknown",
        "priority": (fields.get("priority") or {}).get("name") or "Unknown",
        "issueType": (fields.get("issuetype") or {}).get("name") or "Unknown",
        "assignee": (fields.get("assignee") or {}).get("displayName") or "Unassigned",
        "reporter": (fields.get("reporter") or {}).get("displayName") or "Unknown",
        "created": parse_date_ymd(created) if created else "Unknown",
        "updated": parse_date_ymd(updated) if updated else "Unknown",
        "timeSpent": (
            format_time_spent(fields["timespent"]) if fields.get("timespent") else "None"
        ),
        "labels": list(fields.get("labels") or []),
        "recentComments": get_recent_comments(
            fields.get("comment"), caps.comment_count, caps.comment_chars
        ),
        "url": f"https://{atlassian_domain}/browse/{data.get('key')}",
    }

    custom_fields = extract_custom_fields(fields, field_mappings)
    if custom_fields:
        formatted["customFields"] = custom_fields

    return formatted


def format_jira_ticket_response(ticket: Mapping[str, Any]) -> str:
    """Render a formatted ticket as the text returned to the client."""
    lines = [
        f"JIRA Ticket Details: {ticket.get('key')}",
        "",
        f"Summary: {ticket.get('summary')}",
        f"Status: {ticket.get('status')}",
        f"Priority: {ticket.get('priority')}",
        f"Type: {ticket.get('issueType')}",
        f"Assignee: {ticket.get('assignee')}",
        f"Reporter: {ticket.get('reporter')}",
        f"Created: {ticket.get('created')}",
        f"Updated: {ticket.get('updated')}",
        f"Time Spent: {ticket.get('timeSpent')}",
    ]
    if ticket.get("labels"):
        lines.append(f"Labels: {', '.join(ticket['labels'])}")
    lines.append(f"URL: {ticket.get('url')}")
    lines.append("")

    if ticket.get("customFields"):
        lines.append("Custom Fields:")
        lines.extend(f"- {f['name']}: {f['value']}" for f in ticket["customFields"])
        lines.append("")

    lines.append(f"Description:\n{ticket.get('description')}")
    lines.append("")

    comments = ticket.get("recentComments") or []
    if comments:
        lines.append(f"Recent ({len(comments)}) Comments:")
        for index, comment in enumerate(comments, 1):
            lines.append("")
            lines.append(
                f"{index}. {comment['author']} "
                f"({comment['created']} at {comment['createdTime']})"
            )
            lines.append(f"   {comment['body']}")
    else:
        lines.append("No recent comments found.")

    return "\n".join(lines) + "\n"
