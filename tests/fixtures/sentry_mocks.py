"""Canned Sentry API paths and payloads."""

from tests.utils.factories import SentryEventFactory, SentryIssueFactory, SentryTagFactory

SENTRY_API = "/api/0"
ORG = "acme"
ISSUE_ID = 4321

ORGANIZATIONS_PATH = f"{SENTRY_API}/organizations/"
PROJECTS_PATH = f"{SENTRY_API}/organizations/{ORG}/projects/"
ALL_PROJECTS_PATH = f"{SENTRY_API}/projects/"
ISSUES_PATH = f"{SENTRY_API}/organizations/{ORG}/issues/"
ISSUE_PATH = f"{SENTRY_API}/organizations/{ORG}/issues/{ISSUE_ID}/"
LATEST_EVENT_PATH = f"{ISSUE_PATH}events/latest/"
TAGS_PATH = f"{ISSUE_PATH}tags/"

MOCK_ORGANIZATIONS = [
    {"id": "1", "slug": "acme", "name": "Acme Corp", "status": {"id": "active"}},
    {"id": "2", "slug": "globex", "name": "Globex", "status": {"id": "active"}},
]

MOCK_PROJECTS = [
    {"id": "11", "slug": "web-app", "name": "Web App", "platform": "javascript", "teams": []},
    {"id": "12", "slug": "api", "name": "API", "platform": "python", "teams": []},
]

MOCK_ISSUES = [
    SentryIssueFactory.with_jira_link("4321", "PROJ-7"),
    SentryIssueFactory.create("4322", shortId="WEB-1B", title="ChunkLoadError"),
]

MOCK_ISSUE = SentryIssueFactory.create(str(ISSUE_ID))

MOCK_LATEST_EVENT = SentryEventFactory.create(frame_count=12)

MOCK_TAGS = [
    SentryTagFactory.create("browser.name", [("Chrome", 60), ("Firefox", 25), ("Safari", 10), ("Edge", 5)]),
    SentryTagFactory.create("os.name", [("Windows", 70), ("macOS", 30)]),
    SentryTagFactory.create("url", [("https://acme.test/cart", 100)]),
]


def register_sentry_routes(transport) -> None:
    """Register the happy-path Sentry responses on a RecordingTransport."""
    transport.add("GET", ORGANIZATIONS_PATH, MOCK_ORGANIZATIONS)
    transport.add("GET", PROJECTS_PATH, MOCK_PROJECTS)
    transport.add("GET", ALL_PROJECTS_PATH, MOCK_PROJECTS)
    transport.add("GET", ISSUES_PATH, MOCK_ISSUES)
    transport.add("GET", ISSUE_PATH, MOCK_ISSUE)
    transport.add("GET", LATEST_EVENT_PATH, MOCK_LATEST_EVENT)
    transport.add("GET", TAGS_PATH, MOCK_TAGS)
