from .definitions import TOOLS, ToolDefinition, ToolName, get_tool

__all__ = ["TOOLS", "ToolDefinition", "ToolName", "get_tool"]
