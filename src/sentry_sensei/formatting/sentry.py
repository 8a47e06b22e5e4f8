"""
Sentry response formatters.

Every function here is pure: it reads the raw Sentry payload, never
mutates it, and returns a new compact structure.
"""

import json
import math
from collections.abc import Mapping, Sequence
from typing import Any

from .policy import DEFAULT_POLICY, FormatPolicy

NO_TITLE = "<no title>"

TAG_KEY_MAP = {
    "browser.name": "browser",
    "browser": "browser",
    "os.name": "os",
    "os": "os",
    "device": "device",
    "device.family": "device",
    "release": "release",
    "environment": "environment",
}

DEEP_ONLY_FIELDS = (
    "platform",
    "logger",
    "type",
    "isUnhandled",
    "hasSeen",
    "numComments",
    "isSubscribed",
    "isBookmarked",
    "isPublic",
    "stats",
)


def _round_half_up(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def summarize_tag(tag: Mapping[str, Any] | None, top_n: int = 3) -> list[dict[str, Any]]:
    """
    Keep the top N values of one tag and add their share of the total.

    Args:
        tag: Tag object with ``topValues`` and ``totalValues``
        top_n: Number of values to keep

    Returns:
        List of ``{name, count, percent, firstSeen, lastSeen}``; percent
        is None when the tag has no total
    """
    if not tag or not isinstance(tag.get("topValues"), list):
        return []

    total = tag.get("totalValues") or 0
    summary = []
    for value in tag["topValues"][:top_n]:
        count = value.get("count") or 0
        summary.append(
            {
                "name": value.get("value"),
                "count": value.get("count"),
                "percent": _round_half_up(count / total * 100) if total else None,
                "firstSeen": value.get("firstSeen"),
                "lastSeen": value.get("lastSeen"),
            }
        )
    return summary


def extract_relevant_tags(
    tags: Sequence[Mapping[str, Any]] | None, top_n: int = 3
) -> dict[str, list[dict[str, Any]]] | None:
    """Summaries of the browser, os, device, release and environment tags.

    Unmapped tag keys are dropped. Returns None when nothing relevant remains.
    """
    if not isinstance(tags, list):
        return None

    relevant: dict[str, list[dict[str, Any]]] = {}
    for tag in tags:
        mapped_key = TAG_KEY_MAP.get(tag.get("key", ""))
        if mapped_key:
            relevant[mapped_key] = summarize_tag(tag, top_n)

    return relevant or None


def _find_trace_entry(latest_event: Mapping[str, Any]) -> Mapping[str, Any] | None:
    for entry in latest_event.get("entries") or []:
        if entry.get("type") in ("exception", "stacktrace"):
            return entry
    return None


def _first_value(entry: Mapping[str, Any]) -> Mapping[str, Any] | None:
    values = (entry.get("data") or {}).get("values") or []
    return values[0] if values else None


def _context_line(entry: Any) -> str:
    # Sentry sends source context as [lineno, code] pairs
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return f"    {entry[0]} | {entry[1]}"
    return f"    {entry}"


def format_stacktrace(
    frames: Sequence[Mapping[str, Any]], max_frames: int, deep: bool = False
) -> str:
    """Render frames innermost-first as ``file:line in function`` lines.

    In deep mode each frame is followed by its source context lines.
    """
    lines = []
    for frame in list(reversed(frames))[:max_frames]:
        filename = frame.get("filename")
        file = filename.split("/")[-1] if filename else "<unknown>"
        function = frame.get("function") or "?"
        lines.append(f"{file}:{frame.get('lineno')} in {function}")
        if deep and frame.get("context"):
            lines.extend(_context_line(entry) for entry in frame["context"])
    return "\n".join(lines)


def format_issue_details(
    issue: Mapping[str, Any] | None,
    tags: Sequence[Mapping[str, Any]] | None = None,
    latest_event: Mapping[str, Any] | None = None,
    deep: bool = False,
    policy: FormatPolicy = DEFAULT_POLICY,
) -> dict[str, Any] | None:
    """
    Compact a Sentry issue for LLM consumption.

    Args:
        issue: Raw issue payload
        tags: Raw tag list for the issue, if fetched
        latest_event: Raw latest event, if fetched
        deep: Include extended fields and use the deep caps
        policy: Truncation caps

    Returns:
        Formatted issue dict, or None for an empty payload
    """
    if not issue:
        return None

    caps = policy.caps(deep)
    project = issue.get("project")
    assigned_to = issue.get("assignedTo")

    formatted: dict[str, Any] = {
        "id": issue.get("id"),
        "shortId": issue.get("shortId"),
        "title": issue.get("title") or NO_TITLE,
        "culprit": issue.get("culprit"),
        "level": issue.get("level"),
        "status": issue.get("status"),
        "firstSeen": issue.get("firstSeen"),
        "lastSeen": issue.get("lastSeen"),
        "count": issue.get("count"),
        "userCount": issue.get("userCount") or 0,
        "project": (
            {"name": project.get("name"), "slug": project.get("slug")}
            if project
            else None
        ),
        "annotations": [
            {"key": annotation.get("displayName"), "url": annotation.get("url")}
            for annotation in issue.get("annotations") or []
            if isinstance(annotation, Mapping)
        ],
    }

    for key in ("permalink", "substatus"):
        if deep or issue.get(key):
            formatted[key] = issue.get(key)
    if deep or assigned_to:
        formatted["assignedTo"] = (
            {"name": assigned_to.get("name"), "email": assigned_to.get("email")}
            if assigned_to
            else None
        )

    if deep:
        formatted["metadata"] = dict(issue.get("metadata") or {})
        for key in DEEP_ONLY_FIELDS:
            formatted[key] = issue.get(key)

        user = issue.get("user")
        if user:
            formatted["user"] = {
                "id": user.get("id"),
                "email": user.get("email"),
                "username": user.get("username"),
                "ipAddress": user.get("ipAddress") or user.get("ip_address"),
            }
        release = issue.get("release")
        if release:
            formatted["release"] = {
                "version": release.get("version"),
                "dateCreated": release.get("dateCreated"),
                "dateReleased": release.get("dateReleased"),
            }

    if tags is not None:
        formatted["tagsSummary"] = extract_relevant_tags(tags, caps.tag_values)

    if latest_event:
        entry = _find_trace_entry(latest_event)
        value = _first_value(entry) if entry else None
        frames = ((value or {}).get("stacktrace") or {}).get("frames")
        if frames:
            formatted["stacktrace"] = format_stacktrace(frames, caps.stack_frames, deep)
            if deep:
                formatted["exception"] = {
                    "type": value.get("type"),
                    "value": value.get("value"),
                    "mechanism": value.get("mechanism"),
                }

    return formatted


def format_issues_list(
    issues: Sequence[Mapping[str, Any]] | None,
    policy: FormatPolicy = DEFAULT_POLICY,
) -> list[dict[str, Any]]:
    if not isinstance(issues, list):
        return []
    return [format_issue_details(issue, policy=policy) for issue in issues if issue]


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "N/A"
    return str(value)


def issue_to_markdown(
    issue: Mapping[str, Any] | None,
    current_date_info: Mapping[str, Any] | None = None,
) -> str:
    """
    Render a formatted issue as labeled lines for chat display.

    Line order is fixed; optional sections only appear when the formatted
    issue carries the matching data.
    """
    if not issue:
        return ""

    lines = []
    if current_date_info:
        lines.append(
            f"Current Date/Time: {current_date_info.get('currentDateTime')} "
            f"({current_date_info.get('timezone')})\n"
        )

    project = issue.get("project")
    lines.append(f"Issue: {issue.get('shortId') or issue.get('id')} - {issue.get('title')}")
    lines.append(f"Status: {_display(issue.get('status'))}")
    lines.append(f"Level: {_display(issue.get('level'))}")
    lines.append(f"First Seen: {_display(issue.get('firstSeen'))}")
    lines.append(f"Last Seen: {_display(issue.get('lastSeen'))}")
    lines.append(f"Event Count: {_display(issue.get('count'))}")
    lines.append(f"User Count: {_display(issue.get('userCount'))}")
    lines.append(f"Project: {project.get('name') if project else 'Unknown'}")

    if issue.get("platform"):
        lines.append(f"Platform: {issue['platform']}")
    if issue.get("type"):
        lines.append(f"Type: {issue['type']}")

    if issue.get("metadata"):
        lines.append("\nMetadata:")
        lines.extend(f"{key}: {_display(value)}" for key, value in issue["metadata"].items())

    user = issue.get("user")
    if user:
        lines.append("\nUser Information:")
        if user.get("email"):
            lines.append(f"Email: {user['email']}")
        if user.get("username"):
            lines.append(f"Username: {user['username']}")
        if user.get("ipAddress"):
            lines.append(f"IP Address: {user['ipAddress']}")

    release = issue.get("release")
    if release:
        lines.append("\nRelease Information:")
        if release.get("version"):
            lines.append(f"Version: {release['version']}")
        if release.get("dateCreated"):
            lines.append(f"Created: {release['dateCreated']}")
        if release.get("dateReleased"):
            lines.append(f"Released: {release['dateReleased']}")

    status_keys = [("isUnhandled", "Unhandled"), ("hasSeen", "Seen"), ("numComments", "Comments")]
    present = [(key, label) for key, label in status_keys if issue.get(key) is not None]
    if present:
        lines.append("\nAdditional Status:")
        lines.extend(f"{label}: {_display(issue[key])}" for key, label in present)

    if issue.get("annotations"):
        lines.append("\nJIRA Links:")
        lines.extend(f"{a.get('key')}: {a.get('url')}" for a in issue["annotations"])

    exception = issue.get("exception")
    if exception:
        lines.append("\nException Details:")
        lines.append(f"Type: {_display(exception.get('type'))}")
        lines.append(f"Value: {_display(exception.get('value'))}")
        if exception.get("mechanism"):
            lines.append(
                f"Mechanism: {json.dumps(exception['mechanism'], separators=(',', ':'))}"
            )

    if issue.get("stacktrace"):
        lines.append("\nStack Trace (Latest Event):")
        lines.append(issue["stacktrace"])

    if issue.get("tagsSummary"):
        lines.append("\nEnvironment Summary:")
        for tag_key, values in issue["tagsSummary"].items():
            summary = ", ".join(
                f"{v.get('name')} ({v['percent']}%)"
                if v.get("percent") is not None
                else f"{v.get('name')} ({v.get('count')})"
                for v in values
            )
            lines.append(f"{tag_key}: {summary}")

    return "\n".join(lines)


def format_organization(org: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not org:
        return None
    return {"id": org.get("id"), "slug": org.get("slug"), "name": org.get("name")}


def format_organizations_list(
    orgs: Sequence[Mapping[str, Any]] | None,
) -> list[dict[str, Any] | None]:
    if not isinstance(orgs, list):
        return []
    return [format_organization(org) for org in orgs]


def format_project(project: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not project:
        return None
    return {
        "id": project.get("id"),
        "slug": project.get("slug"),
        "name": project.get("name"),
        "platform": project.get("platform"),
    }


def format_projects_list(
    projects: Sequence[Mapping[str, Any]] | None,
) -> list[dict[str, Any] | None]:
    if not isinstance(projects, list):
        return []
    return [format_project(project) for project in projects]
