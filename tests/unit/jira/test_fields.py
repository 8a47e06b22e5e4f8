"""Tests for Jira field metadata helpers."""

from sentry_sensei.jira.fields import (
    build_field_mappings,
    extract_allowed_values,
    find_field,
    format_current_value,
    format_field_value,
    format_fields_response,
)
from tests.fixtures.jira_mocks import MOCK_EDITMETA, MOCK_FIELDS, MOCK_ISSUE

MAPPINGS = build_field_mappings(MOCK_FIELDS)


def test_build_field_mappings():
    assert MAPPINGS["customfield_10020"] == {
        "name": "Sprint",
        "key": "customfield_10020",
        "custom": True,
        "schema": {"type": "array", "items": "json"},
    }
    assert build_field_mappings([{"name": "no id"}]) == {}


def test_format_current_value():
    assert format_current_value(None, "string") is None
    assert format_current_value({"displayName": "Dana"}, "user") == "Dana"
    assert format_current_value({"name": "High"}, "priority") == "High"
    assert format_current_value(["a", {"name": "b"}], "array") == "a, b"
    assert format_current_value({"type": "doc", "content": []}, "string") == ""


def test_extract_allowed_values():
    allowed = extract_allowed_values(MOCK_EDITMETA["fields"]["priority"])
    assert allowed[0] == {"id": "1", "name": "Highest", "description": None}
    assert extract_allowed_values(MOCK_EDITMETA["fields"]["summary"]) is None


def test_essential_fields_come_first():
    info = format_fields_response(MOCK_ISSUE, MOCK_EDITMETA, MAPPINGS)

    assert info["ticketKey"] == "PROJ-123"
    assert info["ticketSummary"] == "Checkout button does nothing"
    assert [f["key"] for f in info["essentialFields"]] == [
        "summary",
        "description",
        "assignee",
        "priority",
        "labels",
    ]
    assert [f["key"] for f in info["customFields"]] == [
        "customfield_10016",
        "customfield_10236",
    ]
    assert info["fieldCount"] == {"total": 7, "essential": 5, "custom": 2}


def test_field_description():
    info = format_fields_response(MOCK_ISSUE, MOCK_EDITMETA, MAPPINGS)
    priority = find_field(info, "priority")
    assert priority["name"] == "Priority"
    assert priority["type"] == "priority"
    assert priority["currentValue"] == "High"
    assert priority["editable"] is True
    assert priority["isCustom"] is False
    assert [v["name"] for v in priority["allowedValues"]] == ["Highest", "High", "Medium"]

    criteria = find_field(info, "Acceptance Criteria")
    assert criteria["key"] == "customfield_10236"
    assert criteria["currentValue"] == "Checkout completes"
    assert criteria["isCustom"] is True


def test_without_custom_fields():
    info = format_fields_response(MOCK_ISSUE, MOCK_EDITMETA, MAPPINGS, include_custom_fields=False)
    assert info["customFields"] == []


def test_specific_fields_by_key_or_name():
    info = format_fields_response(
        MOCK_ISSUE, MOCK_EDITMETA, MAPPINGS, specific_fields=["summary", "Story point estimate"]
    )
    assert [f["key"] for f in info["essentialFields"]] == ["summary"]
    assert [f["key"] for f in info["customFields"]] == ["customfield_10016"]


def test_non_editable_fields_listed_when_requested():
    info = format_fields_response(MOCK_ISSUE, MOCK_EDITMETA, MAPPINGS, show_only_editable=False)
    sprint = find_field(info, "Sprint")
    assert sprint["editable"] is False
    status = find_field(info, "status")
    assert status["editable"] is False
    assert status["currentValue"] == {"name": "In Progress"}


def test_format_field_value():
    description = {"key": "description", "type": "string"}
    assert format_field_value("Line\n- bullet", description)["type"] == "doc"
    assert format_field_value("Dana", {"key": "assignee", "type": "user"}) == {"name": "Dana"}
    assert format_field_value("ui", {"key": "labels", "type": "array"}) == ["ui"]
    assert format_field_value("High", {"key": "priority", "type": "priority"}) == {"name": "High"}
    assert format_field_value("Yes", {"key": "customfield_1", "type": "option"}) == {"value": "Yes"}
    assert format_field_value(3, {"key": "customfield_10016", "type": "number"}) == 3
    assert format_field_value("New title", {"key": "summary", "type": "string"}) == "New title"


def test_rich_text_custom_field_converted():
    value = format_field_value("Done when", {"key": "customfield_10236", "type": "string"})
    assert value["content"][0]["content"][0]["text"] == "Done when"


def test_find_field_unknown():
    info = format_fields_response(MOCK_ISSUE, MOCK_EDITMETA, MAPPINGS)
    assert find_field(info, "nope") is None
