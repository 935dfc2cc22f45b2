"""Data types for MCP server connections."""

from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ProviderState(str, Enum):
    """Lifecycle state of a provider connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    CLOSED = "closed"


# No way back to CONNECTING: connections are never retried.
_TRANSITIONS = {
    ProviderState.DISCONNECTED: {ProviderState.CONNECTING},
    ProviderState.CONNECTING: {ProviderState.CONNECTED, ProviderState.FAILED},
    ProviderState.CONNECTED: {ProviderState.CLOSED},
    ProviderState.FAILED: set(),
    ProviderState.CLOSED: set(),
}


@dataclass
class ProviderDescriptor:
    """Declared MCP server, as read from the configuration file.

    Attributes:
        id: Server id (key in the "servers" mapping)
        transport: "stdio", "http" or "sse"
        command: Executable for stdio servers
        args: Command-line arguments for stdio servers
        env: Extra environment for stdio servers
        url: Endpoint for http/sse servers
        headers: HTTP headers for http/sse servers
    """

    id: str
    transport: str
    command: str | None = None
    args: list[str] = field(default_factory=list)
    env: dict[str, str] | None = None
    url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_network(self) -> bool:
        return self.transport in ("http", "sse")


@dataclass
class ToolDefinition:
    """A tool discovered on an MCP server."""

    name: str
    description: str = ""
    input_schema: dict[str, Any] | None = None

    def to_schema(self) -> dict[str, Any]:
        """Convert the tool to the function-calling format sent to Ollama."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description or "",
                "parameters": self.input_schema
                or {"type": "object", "properties": {}},
            },
        }


@dataclass
class ProviderConnection:
    """Runtime state of one MCP server.

    Attributes:
        descriptor: The declared server
        state: Current lifecycle state
        tools: Tools discovered after connecting
        instructions: Usage instructions published by the server, if any
        transport: Transport actually used ("stdio", "streamable-http", "sse")
        error: Description of the last connection failure
        session: The MCP client session while connected
    """

    descriptor: ProviderDescriptor
    state: ProviderState = ProviderState.DISCONNECTED
    tools: list[ToolDefinition] = field(default_factory=list)
    instructions: str | None = None
    transport: str | None = None
    error: str | None = None
    session: Any = None
    stack: AsyncExitStack | None = None

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.tools]

    def set_state(self, state: ProviderState) -> None:
        """Move to a new lifecycle state.

        Raises:
            RuntimeError: If the transition is not allowed
        """
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Provider {self.id}: invalid transition {self.state.value} -> {state.value}"
            )
        self.state = state
