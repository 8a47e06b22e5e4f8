"""Line-delimited JSON-RPC over stdin/stdout."""

import json
import logging
import sys
from typing import IO

import anyio

from .processor import MCPProcessor

logger = logging.getLogger("sentry-sensei.stdio")


async def serve_stdio(
    processor: MCPProcessor,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> None:
    """
    Read one JSON-RPC message per line and write one response per line.

    Credentials come only from the server configuration, so no headers
    are passed to the processor. Notifications produce no output.
    """
    reader = anyio.wrap_file(stdin or sys.stdin)
    writer = anyio.wrap_file(stdout or sys.stdout)
    logger.info("Serving MCP over stdio")

    async for line in reader:
        if not line.strip():
            continue
        response = await processor.process_raw(None, line)
        if response.body is None:
            continue
        await writer.write(json.dumps(response.body, ensure_ascii=False) + "\n")
        await writer.flush()

    logger.info("stdin closed, stopping")
