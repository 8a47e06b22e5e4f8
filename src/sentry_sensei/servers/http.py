"""HTTP transport: Starlette app serving the processor."""

import logging
from datetime import datetime, timezone

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..credentials import CREDENTIAL_HEADERS
from .processor import MCPProcessor

logger = logging.getLogger("sentry-sensei.http")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": ", ".join(
        ("Content-Type", "Authorization", *CREDENTIAL_HEADERS)
    ),
}


class CORSMiddleware(BaseHTTPMiddleware):
    """Answers preflight requests and adds CORS headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


def create_app(processor: MCPProcessor) -> Starlette:
    """Build the ASGI app exposing ``GET /health`` and ``POST /mcp``."""

    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "server": processor.config.name,
                "version": processor.config.version,
            }
        )

    async def mcp_endpoint(request: Request) -> Response:
        raw = await request.body()
        status, body = await processor.process_raw(request.headers, raw)
        if body is None:
            return Response(status_code=status)
        return JSONResponse(body, status_code=status)

    return Starlette(
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Route("/healthz", health_check, methods=["GET"]),
            Route("/mcp", mcp_endpoint, methods=["POST"]),
        ],
        middleware=[Middleware(CORSMiddleware)],
    )


async def run_http(processor: MCPProcessor, host: str, port: int) -> None:
    """Serve the app with uvicorn until cancelled."""
    app = create_app(processor)
    config = uvicorn.Config(app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info(f"Listening on http://{host}:{port}/mcp")
    await server.serve()
