"""Builders for scripted Ollama responses and MCP sessions used across tests."""

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock


def chat_response(content: str = "", tool_calls: list[dict] | None = None, thinking: str = "") -> dict[str, Any]:
    """Build a non-streaming Ollama chat response dict."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if thinking:
        message["thinking"] = thinking
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {"model": "qwen3:4b", "message": message, "done": True}


def tool_call(name: str, arguments: Any = None) -> dict[str, Any]:
    """Build one entry of an Ollama tool_calls list."""
    return {"function": {"name": name, "arguments": arguments if arguments is not None else {}}}


async def stream_of(chunks: list[dict[str, Any]], closed: list | None = None):
    """Async generator yielding stream chunks, recording when it is closed."""
    try:
        for chunk in chunks:
            yield chunk
    finally:
        if closed is not None:
            closed.append(True)


def fake_session(tool_names=(), instructions=None, resources=(), resource_text="Use it wisely."):
    """Create a mock MCP ClientSession."""
    session = AsyncMock()
    session.initialize.return_value = SimpleNamespace(instructions=instructions)
    session.list_tools.return_value = SimpleNamespace(
        tools=[
            SimpleNamespace(name=name, description=f"{name} tool", inputSchema={"type": "object"})
            for name in tool_names
        ]
    )
    session.list_resources.return_value = SimpleNamespace(resources=list(resources))
    session.read_resource.return_value = SimpleNamespace(
        contents=[SimpleNamespace(text=resource_text)]
    )
    return session


def call_result(text: str, is_error: bool = False):
    """Build an MCP CallToolResult stand-in with a single text item."""
    data = {"content": [{"type": "text", "text": text}], "isError": is_error}
    return SimpleNamespace(model_dump=lambda mode=None: data)
