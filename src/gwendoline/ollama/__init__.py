"""Ollama client wrapper and response types.

This package provides the async client used to talk to the Ollama API and
the types a chat turn is reduced to.
"""

from gwendoline.ollama.client import OllamaClient
from gwendoline.ollama.types import (
    ToolCallRequest,
    TurnOutcome,
    parse_tool_calls,
    turn_from_response,
)

__all__ = [
    "OllamaClient",
    "ToolCallRequest",
    "TurnOutcome",
    "parse_tool_calls",
    "turn_from_response",
]
