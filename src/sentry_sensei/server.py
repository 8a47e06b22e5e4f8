import logging

from .config import ServerConfig
from .credentials import StoredTokenProvider
from .servers import MCPProcessor, run_http, serve_stdio
from .utils.logging import log_config_param

logger = logging.getLogger("sentry-sensei")


def log_startup_config(config: ServerConfig) -> None:
    """Log the effective startup configuration with secrets masked."""
    defaults = config.credentials
    logger.info(f"Environment: {'production' if config.production else 'development'}")
    logger.info(f"Read-only mode: {'ENABLED' if config.read_only else 'DISABLED'}")
    if config.enabled_tools is not None:
        logger.info(f"Enabled tools: {', '.join(sorted(config.enabled_tools))}")

    log_config_param(logger, "Sentry", "host", defaults.sentry_host)
    log_config_param(logger, "Sentry", "organization", defaults.sentry_organization)
    log_config_param(logger, "Sentry", "token", defaults.sentry_token, sensitive=True)
    log_config_param(logger, "JIRA", "domain", defaults.atlassian_domain)
    log_config_param(logger, "JIRA", "email", defaults.jira_email)
    log_config_param(logger, "JIRA", "token", defaults.jira_token, sensitive=True)


def create_processor(config: ServerConfig) -> MCPProcessor:
    return MCPProcessor(config, token_store=StoredTokenProvider(config.token_dir))


async def run_server(config: ServerConfig, transport: str = "stdio") -> None:
    """Run the Sentry Sensei server with the specified transport."""
    log_startup_config(config)
    processor = create_processor(config)

    if transport == "http":
        await run_http(processor, config.host, config.port)
    else:
        await serve_stdio(processor)
