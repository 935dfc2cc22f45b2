"""Connection management for MCP servers.

The ProviderConnectionManager owns every MCP client session for the lifetime
of a run: it connects to the declared servers at startup, discovers their tools
and instructions, forwards tool calls, and closes everything at shutdown.
Each server succeeds or fails on its own; a failed server is left out and the
others stay usable.

Sessions are opened one after another in declaration order and closed in
reverse order, because the MCP transports are anyio task groups that must be
exited from the task that entered them, last-in first-out.
"""

import logging
import re
from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.sse import sse_client
from mcp.client.stdio import stdio_client
from mcp.client.streamable_http import streamablehttp_client

from gwendoline.errors import ProviderNotConnectedError, ProviderToolError
from gwendoline.providers.types import (
    ProviderConnection,
    ProviderDescriptor,
    ProviderState,
    ToolDefinition,
)
from gwendoline.tools.results import render_tool_result

logger = logging.getLogger(__name__)

INSTRUCTION_NAME_PATTERN = re.compile(r"instruction|guide|usage|readme|help", re.IGNORECASE)


def looks_like_instructions(resource: Any) -> bool:
    """Guess whether an MCP resource holds usage instructions.

    Matches on the resource name or URI, or a media type that mentions
    instructions. This is a heuristic, not part of the protocol.
    """
    name = getattr(resource, "name", "") or ""
    uri = str(getattr(resource, "uri", "") or "")
    mime_type = getattr(resource, "mimeType", "") or ""
    if INSTRUCTION_NAME_PATTERN.search(name) or INSTRUCTION_NAME_PATTERN.search(uri):
        return True
    return "instruction" in mime_type.lower()


class ProviderConnectionManager:
    """Connects to MCP servers and exposes their tools.

    Attributes:
        connections: One ProviderConnection per declared server, in
            declaration order
        request_timeout: Per-request deadline in seconds for MCP requests
    """

    def __init__(
        self,
        descriptors: list[ProviderDescriptor],
        request_timeout: float = 60.0,
    ) -> None:
        self.connections = [ProviderConnection(descriptor=d) for d in descriptors]
        self.request_timeout = request_timeout

    @property
    def _read_timeout(self) -> timedelta:
        return timedelta(seconds=self.request_timeout)

    def get(self, provider_id: str) -> ProviderConnection | None:
        """Get a connection by server id."""
        for connection in self.connections:
            if connection.id == provider_id:
                return connection
        return None

    def connected(self) -> list[ProviderConnection]:
        """Connected servers, in discovery order."""
        return [c for c in self.connections if c.state == ProviderState.CONNECTED]

    async def connect_all(self) -> list[ProviderConnection]:
        """Connect to every declared server and discover its tools.

        Returns:
            The servers that ended up connected
        """
        for connection in self.connections:
            await self._connect(connection)

        connected = self.connected()
        logger.info(
            f"Connected to {len(connected)} of {len(self.connections)} MCP servers"
        )
        return connected

    async def _connect(self, connection: ProviderConnection) -> None:
        descriptor = connection.descriptor
        connection.set_state(ProviderState.CONNECTING)

        if descriptor.is_network:
            attempts = [
                ("streamable-http", self._open_streamable_http),
                ("sse", self._open_sse),
            ]
        else:
            attempts = [("stdio", self._open_stdio)]

        for transport, opener in attempts:
            stack = AsyncExitStack()
            try:
                session = await opener(stack, descriptor)
                init_result = await session.initialize()
            except Exception as e:
                logger.warning(
                    f"Failed to connect to MCP server {descriptor.id} via {transport}: {e}"
                )
                connection.error = str(e) or type(e).__name__
                await self._close_stack(descriptor.id, stack)
                continue

            connection.session = session
            connection.stack = stack
            connection.transport = transport
            connection.error = None
            connection.set_state(ProviderState.CONNECTED)
            await self._discover(connection, init_result)
            logger.info(
                f"Connected to MCP server {descriptor.id} ({transport}) "
                f"with tools: {connection.tool_names}"
            )
            return

        connection.set_state(ProviderState.FAILED)
        logger.error(f"MCP server {descriptor.id} unavailable: {connection.error}")

    async def _open_stdio(
        self, stack: AsyncExitStack, descriptor: ProviderDescriptor
    ) -> ClientSession:
        params = StdioServerParameters(
            command=descriptor.command,
            args=descriptor.args,
            env=descriptor.env,
        )
        read, write = await stack.enter_async_context(stdio_client(params))
        return await stack.enter_async_context(
            ClientSession(read, write, read_timeout_seconds=self._read_timeout)
        )

    async def _open_streamable_http(
        self, stack: AsyncExitStack, descriptor: ProviderDescriptor
    ) -> ClientSession:
        read, write, _ = await stack.enter_async_context(
            streamablehttp_client(
                descriptor.url,
                headers=descriptor.headers or None,
                timeout=self.request_timeout,
            )
        )
        return await stack.enter_async_context(
            ClientSession(read, write, read_timeout_seconds=self._read_timeout)
        )

    async def _open_sse(
        self, stack: AsyncExitStack, descriptor: ProviderDescriptor
    ) -> ClientSession:
        read, write = await stack.enter_async_context(
            sse_client(
                descriptor.url,
                headers=descriptor.headers or None,
                timeout=self.request_timeout,
            )
        )
        return await stack.enter_async_context(
            ClientSession(read, write, read_timeout_seconds=self._read_timeout)
        )

    async def _discover(self, connection: ProviderConnection, init_result: Any) -> None:
        """Fetch the tool list and instructions of a freshly opened session.

        Each request stands on its own: a server whose tool list cannot be
        fetched stays connected with no tools.
        """
        try:
            tools_result = await connection.session.list_tools()
        except Exception as e:
            logger.warning(f"Could not list tools of MCP server {connection.id}: {e}")
            connection.tools = []
        else:
            connection.tools = [
                ToolDefinition(
                    name=tool.name,
                    description=tool.description or "",
                    input_schema=tool.inputSchema,
                )
                for tool in tools_result.tools
            ]

        instructions = []
        server_instructions = getattr(init_result, "instructions", None)
        if server_instructions:
            instructions.append(server_instructions.strip())
        instructions.extend(await self._read_instruction_resources(connection))
        connection.instructions = "\n\n".join(instructions) or None

    async def _read_instruction_resources(self, connection: ProviderConnection) -> list[str]:
        """Read resources that look like usage instructions.

        Resources are optional for MCP servers, so any failure here only
        means there are no instructions to read.
        """
        try:
            resources_result = await connection.session.list_resources()
        except Exception as e:
            logger.debug(f"MCP server {connection.id} does not list resources: {e}")
            return []

        texts = []
        for resource in resources_result.resources:
            if not looks_like_instructions(resource):
                continue
            try:
                result = await connection.session.read_resource(resource.uri)
            except Exception as e:
                logger.warning(
                    f"Could not read resource {resource.uri} of MCP server {connection.id}: {e}"
                )
                continue
            for contents in result.contents:
                text = getattr(contents, "text", None)
                if text:
                    texts.append(text.strip())
            logger.debug(f"Loaded instructions from {resource.uri} ({connection.id})")
        return texts

    def get_instructions(self) -> str:
        """Instructions of all connected servers, tagged by server id."""
        blocks = [
            f"## {connection.id}\n{connection.instructions}"
            for connection in self.connected()
            if connection.instructions
        ]
        return "\n\n".join(blocks)

    async def call_tool(
        self, provider_id: str, name: str, arguments: dict[str, Any]
    ) -> str:
        """Call a tool on a specific server.

        Args:
            provider_id: Id of the server owning the tool
            name: Tool name
            arguments: Tool arguments

        Returns:
            str: The tool result rendered as text

        Raises:
            ProviderNotConnectedError: If the server is not connected
            ProviderToolError: If the server reports the call as failed
            Exception: If the MCP request itself fails
        """
        connection = self.get(provider_id)
        if connection is None or connection.state != ProviderState.CONNECTED:
            raise ProviderNotConnectedError(f"MCP server {provider_id} is not connected")

        result = await connection.session.call_tool(
            name, arguments, read_timeout_seconds=self._read_timeout
        )
        data = result.model_dump(mode="json")
        logger.debug(f"Raw MCP result for {name}: {data}")

        text = render_tool_result(data)
        if data.get("isError"):
            raise ProviderToolError(text or f"Tool '{name}' reported an error")
        return text

    async def close(self) -> None:
        """Close every connected server.

        A failure while closing one server is logged and the rest are still
        closed.
        """
        for connection in reversed(self.connected()):
            await self._close_stack(connection.id, connection.stack)
            connection.session = None
            connection.stack = None
            connection.set_state(ProviderState.CLOSED)
            logger.debug(f"Closed MCP server {connection.id}")

    async def _close_stack(self, provider_id: str, stack: AsyncExitStack | None) -> None:
        if stack is None:
            return
        try:
            await stack.aclose()
        except Exception as e:
            logger.warning(f"Error while closing MCP server {provider_id}: {e}")
