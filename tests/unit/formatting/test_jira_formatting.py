"""Tests for the Jira ticket formatters."""

import copy

import pytest

from sentry_sensei.formatting.jira import (
    NO_DESCRIPTION,
    extract_custom_fields,
    format_custom_field_value,
    format_jira_response,
    format_jira_ticket_response,
    format_time_spent,
    get_recent_comments,
)
from sentry_sensei.jira.fields import build_field_mappings
from tests.fixtures.jira_mocks import MOCK_FIELDS, MOCK_ISSUE
from tests.utils.factories import JiraIssueFactory, adf_doc

DOMAIN = "acme.atlassian.net"
MAPPINGS = build_field_mappings(MOCK_FIELDS)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(None, "0m"), (0, "0m"), (59, "0m"), (60, "1m"), (3600, "1h 0m"), (5400, "1h 30m")],
)
def test_format_time_spent(seconds, expected):
    assert format_time_spent(seconds) == expected


class TestRecentComments:
    def test_keeps_last_comments_in_chronological_order(self):
        comments = get_recent_comments(JiraIssueFactory.comments(5), 3, 300)
        assert [c["author"] for c in comments] == ["Author 3", "Author 4", "Author 5"]
        assert comments[0] == {
            "author": "Author 3",
            "created": "2024-03-03",
            "createdTime": "08:30:00",
            "body": "Comment 3",
        }

    def test_truncates_bodies(self):
        field = {"comments": [{"author": {"displayName": "A"}, "body": "x" * 50}]}
        assert get_recent_comments(field, 3, 10)[0]["body"] == "x" * 10

    def test_defaults_for_missing_parts(self):
        comments = get_recent_comments({"comments": [{}]}, 3, 300)
        assert comments == [
            {
                "author": "Unknown",
                "created": "Unknown",
                "createdTime": "Unknown",
                "body": "No content",
            }
        ]

    def test_no_comments(self):
        assert get_recent_comments(None, 3, 300) == []
        assert get_recent_comments({"comments": []}, 3, 300) == []


class TestCustomFields:
    def test_whitelisted_fields_in_id_order(self):
        custom = extract_custom_fields(MOCK_ISSUE["fields"], MAPPINGS)
        assert custom == [
            {"id": "customfield_10016", "name": "Story point estimate", "value": "5"},
            {"id": "customfield_10020", "name": "Sprint", "value": "Sprint 14 (active)"},
            {
                "id": "customfield_10236",
                "name": "Acceptance Criteria",
                "value": "Checkout completes",
            },
        ]

    def test_without_mappings(self):
        assert extract_custom_fields(MOCK_ISSUE["fields"], None) == []

    @pytest.mark.parametrize(
        ("value", "schema", "expected"),
        [
            (None, {"type": "string"}, None),
            ([], {"type": "array"}, None),
            ({"displayName": "Dana"}, {"type": "user"}, "Dana"),
            ({"value": "Critical", "id": "1"}, {"type": "option"}, "Critical"),
            (["a", "b"], {"type": "array"}, "a, b"),
            (3.5, {"type": "number"}, "3.5"),
            (True, None, "True"),
        ],
    )
    def test_format_custom_field_value(self, value, schema, expected):
        assert format_custom_field_value(value, schema) == expected


class TestFormatJiraResponse:
    def test_standard(self):
        ticket = format_jira_response(MOCK_ISSUE, DOMAIN, False, MAPPINGS)

        assert ticket["key"] == "PROJ-123"
        assert ticket["summary"] == "Checkout button does nothing"
        assert ticket["description"] == "Clicking checkout has no effect."
        assert ticket["status"] == "In Progress"
        assert ticket["priority"] == "High"
        assert ticket["issueType"] == "Bug"
        assert ticket["assignee"] == "Dana Smith"
        assert ticket["reporter"] == "Lee Chen"
        assert ticket["created"] == "2024-03-01"
        assert ticket["updated"] == "2024-03-02"
        assert ticket["timeSpent"] == "1h 30m"
        assert ticket["labels"] == ["frontend", "checkout"]
        assert ticket["url"] == "https://acme.atlassian.net/browse/PROJ-123"
        assert len(ticket["recentComments"]) == 3
        assert len(ticket["customFields"]) == 3

    def test_deep_details_widen_caps(self):
        issue = JiraIssueFactory.create(
            fields={"description": "d" * 800, "comment": JiraIssueFactory.comments(12)}
        )
        standard = format_jira_response(issue, DOMAIN)
        deep = format_jira_response(issue, DOMAIN, deep_details=True)

        assert len(standard["description"]) == 500
        assert len(deep["description"]) == 800
        assert len(standard["recentComments"]) == 3
        assert [c["author"] for c in deep["recentComments"]][0] == "Author 3"
        assert len(deep["recentComments"]) == 10

    def test_minimal_issue_defaults(self):
        ticket = format_jira_response(JiraIssueFactory.create_minimal("X-1"), DOMAIN)
        assert ticket["summary"] == "No summary available"
        assert ticket["description"] == NO_DESCRIPTION
        assert ticket["status"] == "Unknown"
        assert ticket["assignee"] == "Unassigned"
        assert ticket["created"] == "Unknown"
        assert ticket["timeSpent"] == "None"
        assert ticket["labels"] == []
        assert ticket["recentComments"] == []
        assert "customFields" not in ticket

    def test_is_repeatable_and_does_not_mutate(self):
        issue = copy.deepcopy(MOCK_ISSUE)
        first = format_jira_response(issue, DOMAIN, False, MAPPINGS)
        second = format_jira_response(issue, DOMAIN, False, MAPPINGS)
        assert first == second
        assert issue == MOCK_ISSUE


class TestTicketText:
    def test_layout_without_comments(self):
        ticket = {
            "key": "PROJ-1",
            "summary": "S",
            "status": "Open",
            "priority": "High",
            "issueType": "Bug",
            "assignee": "A",
            "reporter": "R",
            "created": "2024-03-01",
            "updated": "2024-03-02",
            "timeSpent": "None",
            "labels": [],
            "recentComments": [],
            "url": "https://acme.atlassian.net/browse/PROJ-1",
            "description": "D",
        }
        assert format_jira_ticket_response(ticket) == (
            "JIRA Ticket Details: PROJ-1\n"
            "\n"
            "Summary: S\n"
            "Status: Open\n"
            "Priority: High\n"
            "Type: Bug\n"
            "Assignee: A\n"
            "Reporter: R\n"
            "Created: 2024-03-01\n"
            "Updated: 2024-03-02\n"
            "Time Spent: None\n"
            "URL: https://acme.atlassian.net/browse/PROJ-1\n"
            "\n"
            "Description:\n"
            "D\n"
            "\n"
            "No recent comments found.\n"
        )

    def test_layout_with_labels_custom_fields_and_comments(self):
        ticket = format_jira_response(MOCK_ISSUE, DOMAIN, False, MAPPINGS)
        text = format_jira_ticket_response(ticket)

        assert "Time Spent: 1h 30m\nLabels: frontend, checkout\nURL:" in text
        assert "Custom Fields:\n- Story point estimate: 5\n- Sprint: Sprint 14 (active)" in text
        assert "Recent (3) Comments:\n\n1. Author 3 (2024-03-03 at 08:30:00)\n   Comment 3" in text
        assert text.endswith("3. Author 5 (2024-03-05 at 08:30:00)\n   Comment 5\n")

    def test_multi_paragraph_description(self):
        issue = JiraIssueFactory.create(fields={"description": adf_doc("a", "b")})
        assert format_jira_response(issue, DOMAIN)["description"] == "a\nb"
