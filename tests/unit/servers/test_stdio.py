"""Tests for the stdio transport."""

import io
import json

import pytest

from sentry_sensei.servers import MCPProcessor, serve_stdio


@pytest.mark.anyio
async def test_serves_one_response_per_request(server_config):
    stdin = io.StringIO(
        "\n".join(
            [
                json.dumps({"jsonrpc": "2.0", "method": "initialize", "id": 1}),
                "",
                json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
                json.dumps({"jsonrpc": "2.0", "method": "tools/list", "id": 2}),
                "{broken",
            ]
        )
        + "\n"
    )
    stdout = io.StringIO()

    await serve_stdio(MCPProcessor(server_config), stdin=stdin, stdout=stdout)

    lines = stdout.getvalue().splitlines()
    assert len(lines) == 3
    responses = [json.loads(line) for line in lines]
    assert responses[0]["result"]["serverInfo"]["name"] == "sentry-sensei-mcp"
    assert responses[1]["id"] == 2
    assert len(responses[1]["result"]["tools"]) == 8
    assert responses[2]["error"]["code"] == -32700


@pytest.mark.anyio
async def test_empty_input(server_config):
    stdout = io.StringIO()
    await serve_stdio(MCPProcessor(server_config), stdin=io.StringIO(""), stdout=stdout)
    assert stdout.getvalue() == ""
