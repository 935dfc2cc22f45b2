"""Type definitions for Ollama integration.

This module contains dataclasses for the parts of an Ollama chat response the
conversation loop cares about: visible text, reasoning, and requested tool
calls.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCallRequest:
    """A tool call requested by the model.

    Attributes:
        name: Name of the requested tool
        arguments: Arguments as sent by the model. Usually a dict, but some
            models send a JSON string; the tool registry normalizes both.
    """

    name: str
    arguments: Any = None

    @staticmethod
    def from_ollama(tool_call: Any) -> "ToolCallRequest":
        """Create a ToolCallRequest from an Ollama tool_calls entry.

        Args:
            tool_call: Dict of the form {"function": {"name", "arguments"}}

        Returns:
            ToolCallRequest: Parsed request
        """
        function = {}
        if isinstance(tool_call, dict):
            function = tool_call.get("function") or {}
        return ToolCallRequest(
            name=function.get("name") or "",
            arguments=function.get("arguments"),
        )


@dataclass
class TurnOutcome:
    """The logical result of one backend turn.

    Streaming and non-streaming turns both reduce to this shape.

    Attributes:
        content: Visible assistant text
        thinking: Reasoning text reported separately by the model
        tool_calls: Tool calls requested in this turn, in request order
    """

    content: str = ""
    thinking: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0


def parse_tool_calls(message: dict[str, Any]) -> list[ToolCallRequest]:
    """Extract tool call requests from an Ollama message dict."""
    raw_calls = message.get("tool_calls") or []
    return [ToolCallRequest.from_ollama(tool_call) for tool_call in raw_calls]


def turn_from_response(response: dict[str, Any]) -> TurnOutcome:
    """Build a TurnOutcome from a complete (non-streaming) chat response."""
    message = response.get("message") or {}
    return TurnOutcome(
        content=message.get("content") or "",
        thinking=message.get("thinking") or "",
        tool_calls=parse_tool_calls(message),
    )
