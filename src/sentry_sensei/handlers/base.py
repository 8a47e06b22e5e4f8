import json
from typing import Any

from mcp.types import CallToolResult, TextContent


def text_result(text: str) -> CallToolResult:
    """Wrap text as a tool result with a single text block."""
    return CallToolResult(content=[TextContent(type="text", text=text)])


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)
