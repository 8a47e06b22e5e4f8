import asyncio
import logging

import click
from dotenv import load_dotenv

__version__ = "0.3.0"

from .logging_config import log_operation, setup_logger  # noqa: E402

logger = logging.getLogger("sentry-sensei")


@click.command()
@click.version_option(__version__, prog_name="sentry-sensei")
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default="stdio",
    help="Transport type (stdio or http)",
)
@click.option("--host", help="Host to bind for HTTP transport")
@click.option("--port", type=int, help="Port to listen on for HTTP transport")
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    default=False,
    help="Enable/disable file logging",
)
@click.option("--token", "sentry_token", help="Sentry API token")
@click.option("--sentry-host", help="Sentry host (default: https://sentry.io)")
@click.option("--organization", help="Default Sentry organization slug")
@click.option("--jira-token", help="JIRA API token")
@click.option(
    "--atlassian-domain", help="Atlassian domain (e.g., your-company.atlassian.net)"
)
@click.option("--jira-email", help="Email of the JIRA API token owner")
@click.option(
    "--read-only",
    is_flag=True,
    default=None,
    help="Hide and reject tools that modify data",
)
def main(
    verbose: int,
    env_file: str | None,
    transport: str,
    host: str | None,
    port: int | None,
    log_dir: str | None,
    log_to_file: bool,
    sentry_token: str | None,
    sentry_host: str | None,
    organization: str | None,
    jira_token: str | None,
    atlassian_domain: str | None,
    jira_email: str | None,
    read_only: bool | None,
) -> None:
    """Sentry Sensei MCP Server - Sentry issues and JIRA tickets for MCP clients."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    logging_level = None
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    setup_logger(
        name="sentry-sensei",
        level=logging_level,
        log_to_file=log_to_file,
        log_dir=log_dir,
    )

    from . import server
    from .config import ServerConfig

    with log_operation(logger, "application_startup", app_version=__version__):
        config = ServerConfig.from_env(
            credentials={
                "sentry_host": sentry_host,
                "sentry_organization": organization,
                "sentry_token": sentry_token,
                "atlassian_domain": atlassian_domain,
                "jira_token": jira_token,
                "jira_email": jira_email,
            },
            read_only=read_only,
            host=host,
            port=port,
        )
        logger.info(f"Starting Sentry Sensei v{__version__} with {transport} transport")

    asyncio.run(server.run_server(config, transport=transport))


__all__ = ["main", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()
