"""Jira field metadata helpers for listing and editing ticket fields."""

from collections.abc import Iterable, Mapping
from typing import Any

from ..formatting.adf import extract_text, text_to_adf

ESSENTIAL_FIELDS = (
    "summary",
    "description",
    "assignee",
    "priority",
    "status",
    "labels",
    "components",
    "fixVersions",
    "duedate",
    "reporter",
)

RICH_TEXT_FIELDS = frozenset({"description", "comment", "environment"})

RICH_TEXT_CUSTOM_FIELDS = frozenset(
    {
        "customfield_10217",  # Additional Test Scope
        "customfield_10236",  # Acceptance Criteria
        "customfield_10437",  # Action Plan
        "customfield_10438",  # Deliverables
    }
)


def build_field_mappings(fields: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """Index the ``/field`` response by field id."""
    mappings: dict[str, dict[str, Any]] = {}
    for field in fields:
        field_id = field.get("id")
        if not field_id:
            continue
        mappings[field_id] = {
            "name": field.get("name"),
            "key": field.get("key", field_id),
            "custom": bool(field.get("custom", False)),
            "schema": field.get("schema") or {},
        }
    return mappings


def format_current_value(value: Any, field_type: str | None) -> Any:
    """Human-readable current value of a field."""
    if value is None or value == "" or value == []:
        return None

    if isinstance(value, Mapping) and value.get("type") == "doc":
        return extract_text(value)

    if field_type == "user" and isinstance(value, Mapping):
        return value.get("displayName") or value.get("name") or value.get("key")
    if field_type in ("priority", "status", "issuetype") and isinstance(value, Mapping):
        return value.get("name") or value.get("value")
    if field_type == "array" and isinstance(value, list):
        return ", ".join(
            str(item.get("name") or item.get("value") or item)
            if isinstance(item, Mapping)
            else str(item)
            for item in value
        )
    if field_type == "option" and isinstance(value, Mapping):
        return value.get("value") or value.get("name")
    return value


def extract_allowed_values(field_meta: Mapping[str, Any]) -> list[dict[str, Any]] | None:
    allowed = field_meta.get("allowedValues")
    if not allowed:
        return None
    return [
        {
            "id": option.get("id"),
            "name": option.get("name") or option.get("value"),
            "description": option.get("description"),
        }
        for option in allowed
    ]


def format_single_field(
    field_key: str,
    field_meta: Mapping[str, Any],
    current_value: Any,
    field_mappings: Mapping[str, Mapping[str, Any]],
) -> dict[str, Any]:
    mapping = field_mappings.get(field_key) or {}
    field_type = (field_meta.get("schema") or {}).get("type") or "string"
    return {
        "key": field_key,
        "name": mapping.get("name") or field_meta.get("name") or field_key,
        "required": bool(field_meta.get("required", False)),
        "editable": True,
        "type": field_type,
        "isCustom": bool(mapping.get("custom", field_key.startswith("customfield_"))),
        "currentValue": format_current_value(current_value, field_type),
        "allowedValues": extract_allowed_values(field_meta),
    }


def format_fields_response(
    issue: Mapping[str, Any],
    edit_meta: Mapping[str, Any],
    field_mappings: Mapping[str, Mapping[str, Any]],
    show_only_editable: bool = True,
    include_custom_fields: bool = True,
    specific_fields: list[str] | None = None,
) -> dict[str, Any]:
    """
    Describe a ticket's fields: essential fields first, then the rest.

    Editmeta only lists fields the caller may edit. With
    ``show_only_editable`` off, fields present on the issue but missing
    from editmeta are listed too, marked not editable.
    """
    meta_fields: Mapping[str, Any] = edit_meta.get("fields") or {}
    current_values: Mapping[str, Any] = issue.get("fields") or {}

    candidates = list(meta_fields)
    if not show_only_editable:
        candidates.extend(key for key in current_values if key not in meta_fields)
    if specific_fields:
        wanted = set(specific_fields)
        candidates = [
            key
            for key in candidates
            if key in wanted or (field_mappings.get(key) or {}).get("name") in wanted
        ]

    essential_fields = []
    other_fields = []
    for key in ESSENTIAL_FIELDS:
        if key in candidates:
            essential_fields.append(
                _describe(key, meta_fields, current_values, field_mappings)
            )
    if include_custom_fields:
        for key in candidates:
            if key not in ESSENTIAL_FIELDS:
                other_fields.append(
                    _describe(key, meta_fields, current_values, field_mappings)
                )

    return {
        "ticketKey": issue.get("key"),
        "ticketSummary": current_values.get("summary") or "N/A",
        "essentialFields": essential_fields,
        "customFields": other_fields,
        "fieldCount": {
            "total": len(meta_fields),
            "essential": len(essential_fields),
            "custom": len(other_fields),
        },
    }


def _describe(
    key: str,
    meta_fields: Mapping[str, Any],
    current_values: Mapping[str, Any],
    field_mappings: Mapping[str, Mapping[str, Any]],
) -> dict[str, Any]:
    if key in meta_fields:
        return format_single_field(
            key, meta_fields[key], current_values.get(key), field_mappings
        )
    mapping = field_mappings.get(key) or {}
    info = format_single_field(
        key,
        {"name": mapping.get("name"), "schema": mapping.get("schema") or {}},
        current_values.get(key),
        field_mappings,
    )
    info["editable"] = False
    return info


def is_rich_text_field(field_info: Mapping[str, Any]) -> bool:
    key = field_info.get("key")
    return key in RICH_TEXT_FIELDS or key in RICH_TEXT_CUSTOM_FIELDS


def format_field_value(value: Any, field_info: Mapping[str, Any]) -> Any:
    """
    Shape a user-supplied value the way the Jira edit endpoint expects.

    Plain text for rich-text fields is converted to ADF; names become
    ``{"name": ...}`` objects for users, priorities and statuses.
    """
    if value is None or value == "":
        return value

    if is_rich_text_field(field_info) and isinstance(value, str):
        return text_to_adf(value)

    field_type = field_info.get("type")
    if field_type == "user":
        return {"name": value} if isinstance(value, str) else value
    if field_type == "array":
        return value if isinstance(value, list) else [value]
    if field_type == "option":
        return {"value": value} if isinstance(value, str) else value
    if field_type in ("priority", "status", "issuetype"):
        return {"name": value} if isinstance(value, str) else value
    return value


def find_field(fields_info: Mapping[str, Any], name_or_key: str) -> dict[str, Any] | None:
    """Look up a described field by its key or display name."""
    for field_info in [*fields_info["essentialFields"], *fields_info["customFields"]]:
        if field_info["key"] == name_or_key or field_info["name"] == name_or_key:
            return field_info
    return None
