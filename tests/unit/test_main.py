"""Tests for the command line entry point."""

from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from sentry_sensei import __version__, main


@pytest.fixture
def run_server():
    with (
        patch("sentry_sensei.load_dotenv"),
        patch("sentry_sensei.setup_logger"),
        patch("sentry_sensei.server.run_server", new_callable=AsyncMock) as mock,
    ):
        yield mock


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_options_reach_config(run_server):
    result = CliRunner().invoke(
        main,
        [
            "--transport",
            "http",
            "--port",
            "9001",
            "--token",
            "cli-token",
            "--organization",
            "cli-org",
            "--read-only",
        ],
    )

    assert result.exit_code == 0, result.output
    config = run_server.call_args.args[0]
    assert run_server.call_args.kwargs == {"transport": "http"}
    assert config.port == 9001
    assert config.read_only is True
    assert config.credentials.sentry_token == "cli-token"
    assert config.credentials.sentry_organization == "cli-org"


def test_rejects_unknown_transport(run_server):
    result = CliRunner().invoke(main, ["--transport", "sse"])
    assert result.exit_code != 0
    run_server.assert_not_called()
