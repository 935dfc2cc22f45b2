"""Internal tools, tool registry and tool error messages.

This package provides the internal tools, the registry that merges them with
MCP server tools, and the error messages returned to the model when a tool
call fails.
"""

from gwendoline.tools.base import Tool
from gwendoline.tools.builtin import (
    GetConditionsTool,
    GetTemperatureTool,
    UtcTimeTool,
    default_tools,
)
from gwendoline.tools.envelope import build_tool_error_message
from gwendoline.tools.registry import ToolRegistry, normalize_arguments
from gwendoline.tools.results import render_tool_result

__all__ = [
    "GetConditionsTool",
    "GetTemperatureTool",
    "Tool",
    "ToolRegistry",
    "UtcTimeTool",
    "build_tool_error_message",
    "default_tools",
    "normalize_arguments",
    "render_tool_result",
]
