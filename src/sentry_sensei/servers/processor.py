"""
JSON-RPC request processor shared by every transport.

Transports hand over request headers and the decoded JSON body and get
back an HTTP-style status with the JSON-RPC response body (None for
notifications). This is the only place where exceptions are turned into
JSON-RPC errors.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

import httpx
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)
from pydantic import ValidationError

from ..config import ServerConfig
from ..context import ToolContext
from ..credentials import TokenStore, resolve_credentials
from ..exceptions import UpstreamApiError, invalid_params
from ..logging_config import log_operation
from ..models.arguments import ToolArguments
from ..tools.definitions import TOOLS, ToolDefinition, ToolName
from ..utils.logging import redact_arguments

logger = logging.getLogger("sentry-sensei.processor")

PROTOCOL_VERSION = "2024-11-05"
JSONRPC_VERSION = "2.0"


class ProcessorResponse(NamedTuple):
    status: int
    body: dict[str, Any] | None


def error_body(
    request_id: Any, code: int, message: str, data: Any = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "error": error, "id": request_id}


def result_body(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}


def format_validation_error(tool_name: str, error: ValidationError) -> str:
    problems = ", ".join(
        f"{'.'.join(str(part) for part in detail['loc']) or 'arguments'}: {detail['msg']}"
        for detail in error.errors()
    )
    return f"Invalid arguments for {tool_name}: {problems}"


def parse_arguments(
    definition: ToolDefinition, arguments: Mapping[str, Any]
) -> ToolArguments:
    """Decode raw arguments into the tool's model or raise invalid params."""
    try:
        return definition.arguments_model.model_validate(dict(arguments))
    except ValidationError as e:
        raise invalid_params(
            format_validation_error(definition.name.value, e)
        ) from e


class MCPProcessor:
    """Routes JSON-RPC methods and runs tool calls."""

    def __init__(
        self,
        config: ServerConfig,
        token_store: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        tools: Mapping[ToolName, ToolDefinition] = TOOLS,
    ) -> None:
        self.config = config
        self.token_store = token_store
        self.transport = transport
        self.tools = tools

    def available_tools(self) -> list[ToolDefinition]:
        """Tools advertised and callable under the current configuration.

        The catalog does not depend on which credentials are present.
        """
        available = []
        for definition in self.tools.values():
            if definition.writes and self.config.read_only:
                continue
            if (
                self.config.enabled_tools is not None
                and definition.name.value not in self.config.enabled_tools
            ):
                continue
            available.append(definition)
        return available

    def _find_tool(self, name: str) -> ToolDefinition | None:
        for definition in self.available_tools():
            if definition.name.value == name:
                return definition
        return None

    async def process_raw(
        self, headers: Mapping[str, str] | None, raw: str | bytes
    ) -> ProcessorResponse:
        """Decode a raw body and process it, answering parse errors."""
        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Rejected unparseable request body: {e}")
            return ProcessorResponse(
                400, error_body(None, PARSE_ERROR, "Parse error: invalid JSON")
            )
        return await self.process_request(headers, body)

    async def process_request(
        self, headers: Mapping[str, str] | None, body: Any
    ) -> ProcessorResponse:
        """
        Handle one JSON-RPC envelope.

        Args:
            headers: Request headers, used for credential resolution
            body: Decoded JSON body

        Returns:
            ProcessorResponse with an HTTP-style status and the response body
        """
        request_id = body.get("id") if isinstance(body, dict) else None

        if not isinstance(body, dict) or body.get("jsonrpc") != JSONRPC_VERSION:
            return ProcessorResponse(
                400,
                error_body(
                    request_id, INVALID_REQUEST, 'Invalid Request: jsonrpc must be "2.0"'
                ),
            )

        method = body.get("method")
        if not method or not isinstance(method, str):
            return ProcessorResponse(
                400,
                error_body(request_id, INVALID_REQUEST, "Invalid Request: missing method"),
            )

        logger.debug(f"Processing method {method} (id={request_id})")
        params = body.get("params") or {}

        if method == "initialize":
            return ProcessorResponse(200, result_body(request_id, self._initialize()))
        if method == "notifications/initialized":
            logger.info("Client initialized")
            return ProcessorResponse(200, None)
        if method == "ping":
            return ProcessorResponse(200, result_body(request_id, {}))
        if method == "tools/list":
            tools = [
                definition.to_tool().model_dump(by_alias=True, exclude_none=True)
                for definition in self.available_tools()
            ]
            return ProcessorResponse(200, result_body(request_id, {"tools": tools}))
        if method == "tools/call":
            return await self._call_tool(headers, params, request_id)

        return ProcessorResponse(
            404, error_body(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        )

    def _initialize(self) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": True}},
            "serverInfo": {"name": self.config.name, "version": self.config.version},
        }

    async def _call_tool(
        self,
        headers: Mapping[str, str] | None,
        params: Mapping[str, Any],
        request_id: Any,
    ) -> ProcessorResponse:
        name = params.get("name") if isinstance(params, Mapping) else None
        if not name:
            return ProcessorResponse(
                400, error_body(request_id, INVALID_PARAMS, "Tool name is required")
            )

        definition = self._find_tool(name)
        if definition is None:
            return ProcessorResponse(
                404, error_body(request_id, METHOD_NOT_FOUND, f"Unknown tool: {name}")
            )

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return ProcessorResponse(
                400,
                error_body(
                    request_id,
                    INVALID_PARAMS,
                    f"Invalid arguments for {name}: arguments must be an object",
                ),
            )

        try:
            with log_operation(logger, f"tools/call {name}", tool=name):
                logger.info(f"Tool arguments: {redact_arguments(arguments)}")
                parsed = parse_arguments(definition, arguments)
                context = ToolContext(
                    credentials=resolve_credentials(
                        headers, self.config, self.token_store
                    ),
                    config=self.config,
                    transport=self.transport,
                )
                result = await definition.handler(parsed, context)
        except McpError as e:
            return ProcessorResponse(
                400,
                error_body(request_id, e.error.code, e.error.message, e.error.data),
            )
        except UpstreamApiError as e:
            if e.client_error:
                return ProcessorResponse(
                    400,
                    error_body(
                        request_id, e.json_rpc_code, e.user_message(), e.to_error_data()
                    ),
                )
            return self._internal_error(request_id, e)
        except Exception as e:  # noqa: BLE001 - protocol boundary
            logger.exception(f"Unexpected error in tool {name}")
            return self._internal_error(request_id, e)

        return ProcessorResponse(
            200,
            result_body(
                request_id, result.model_dump(mode="json", by_alias=True, exclude_none=True)
            ),
        )

    def _internal_error(self, request_id: Any, error: Exception) -> ProcessorResponse:
        data = str(error) if self.config.debug_errors else None
        return ProcessorResponse(
            500, error_body(request_id, INTERNAL_ERROR, "Internal server error", data)
        )
