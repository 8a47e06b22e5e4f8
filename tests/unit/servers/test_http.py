"""Tests for the Starlette HTTP transport."""

import pytest
from starlette.testclient import TestClient

from sentry_sensei.servers import MCPProcessor, create_app
from tests.fixtures.sentry_mocks import ORGANIZATIONS_PATH, register_sentry_routes


@pytest.fixture
def client(bare_config, transport):
    register_sentry_routes(transport)
    app = create_app(MCPProcessor(bare_config, transport=transport))
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["server"] == "sentry-sensei-mcp"
    assert payload["version"]
    assert payload["timestamp"].endswith("+00:00")


def test_healthz_alias(client):
    assert client.get("/healthz").json()["status"] == "healthy"


def test_preflight(client):
    response = client.options("/mcp")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
    allowed = response.headers["access-control-allow-headers"]
    assert "X-Sentry-Token" in allowed
    assert "X-Atlassian-Domain" in allowed


def test_initialize(client):
    response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "initialize", "id": 1})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json()["result"]["protocolVersion"] == "2024-11-05"


def test_notification_has_empty_body(client):
    response = client.post(
        "/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"}
    )
    assert response.status_code == 200
    assert response.content == b""


def test_invalid_json(client):
    response = client.post(
        "/mcp", content=b"{oops", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32700


def test_unknown_method_status(client):
    response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "x", "id": 9})
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Method not found: x"


def test_tools_list_without_credentials(client):
    response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "tools/list", "id": 2})
    assert len(response.json()["result"]["tools"]) == 8


def test_credentials_from_request_headers(client, transport):
    response = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"name": "get_sentry_organizations", "arguments": {}},
            "id": 3,
        },
        headers={"X-Sentry-Token": "from-header", "X-Sentry-Host": "sentry.example.com"},
    )

    assert response.status_code == 200
    assert response.json()["result"]["content"][0]["type"] == "text"
    request = transport.requests_to(ORGANIZATIONS_PATH)[0]
    assert request.headers["Authorization"] == "Bearer from-header"
    assert request.url.host == "sentry.example.com"


def test_missing_credentials_is_client_error(client):
    response = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"name": "get_sentry_organizations"},
            "id": 4,
        },
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32602


def test_options_without_preflight_headers_on_any_path(client):
    response = client.options("/anything")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
