"""Tool registry and router.

The registry merges internal tools with the tools discovered on connected MCP
servers into one catalogue for the model, and routes each tool call to exactly
one handler.

Names are unique by first-registered-wins: internal tools are registered
first, then server tools in discovery order, and a later tool with an already
registered name is skipped. Server tools are dispatched to the server recorded
as their owner and never to any other server.
"""

import json
import logging
from typing import TYPE_CHECKING, Any

from gwendoline.errors import ToolArgumentError
from gwendoline.providers.types import ToolDefinition
from gwendoline.tools.base import Tool
from gwendoline.tools.envelope import build_tool_error_message
from gwendoline.tools.results import render_tool_result

if TYPE_CHECKING:
    from gwendoline.providers.manager import ProviderConnectionManager

logger = logging.getLogger(__name__)

INTERNAL_OWNER = "internal"


def normalize_arguments(arguments: Any) -> dict[str, Any]:
    """Turn tool-call arguments into a dict.

    Models send arguments either as an object or as a JSON string. Missing
    arguments become an empty dict.

    Raises:
        ToolArgumentError: If the arguments are not an object
    """
    if arguments is None:
        return {}

    if isinstance(arguments, str):
        if not arguments.strip():
            return {}
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ToolArgumentError(f"Arguments are not valid JSON: {e}") from e

    if not isinstance(arguments, dict):
        raise ToolArgumentError(
            f"Arguments must be an object, got {type(arguments).__name__}"
        )
    return arguments


class ToolRegistry:
    """Catalogue of internal and MCP server tools.

    Attributes:
        providers: The connection manager server tools are dispatched through.
            The registry only looks connections up by id; it never opens or
            closes them.
    """

    def __init__(self, providers: "ProviderConnectionManager | None" = None) -> None:
        self.providers = providers
        self._internal: dict[str, Tool] = {}
        self._definitions: dict[str, dict[str, Any]] = {}
        self._owners: dict[str, str] = {}

    def register(self, tool: Tool) -> bool:
        """Register an internal tool.

        Returns:
            bool: False if the name was already taken and the tool was skipped
        """
        if tool.name in self._owners:
            logger.warning(
                f"Tool {tool.name} already registered by {self._owners[tool.name]}, skipping"
            )
            return False
        self._internal[tool.name] = tool
        self._definitions[tool.name] = tool.to_schema()
        self._owners[tool.name] = INTERNAL_OWNER
        return True

    def register_provider_tool(self, provider_id: str, tool: ToolDefinition) -> bool:
        """Register a tool discovered on an MCP server.

        Returns:
            bool: False if the name was already taken and the tool was skipped
        """
        if tool.name in self._owners:
            logger.warning(
                f"Tool {tool.name} of MCP server {provider_id} is shadowed by "
                f"{self._owners[tool.name]}, skipping"
            )
            return False
        self._definitions[tool.name] = tool.to_schema()
        self._owners[tool.name] = provider_id
        return True

    def register_providers(self) -> None:
        """Register the tools of every connected server, in discovery order."""
        if self.providers is None:
            return
        for connection in self.providers.connected():
            for tool in connection.tools:
                self.register_provider_tool(connection.id, tool)

    def owner_of(self, name: str) -> str | None:
        """Id of the owner of a tool ("internal" or a server id)."""
        return self._owners.get(name)

    def get_definitions(self) -> list[dict[str, Any]]:
        """Tool definitions in function-calling format, in registration order."""
        return list(self._definitions.values())

    @property
    def tool_names(self) -> list[str]:
        return list(self._owners.keys())

    def __len__(self) -> int:
        return len(self._owners)

    def __contains__(self, name: str) -> bool:
        return name in self._owners

    async def execute(self, name: str, arguments: Any) -> str:
        """Run a tool call and return the tool-result text.

        Never raises: unknown tools, bad arguments and failing handlers all
        produce a message for the model.

        Args:
            name: Tool name requested by the model
            arguments: Arguments as sent by the model (dict, JSON string or None)

        Returns:
            str: Text for the tool-result message
        """
        owner = self._owners.get(name)
        if owner is None:
            logger.warning(f"Tool {name} not found")
            return f"Tool '{name}' not found. Available tools: {', '.join(self.tool_names)}"

        try:
            params = normalize_arguments(arguments)
            logger.debug(f"Calling tool {name} ({owner}) with arguments: {params}")
            if owner == INTERNAL_OWNER:
                output = render_tool_result(self._internal[name].run(params))
            else:
                output = await self.providers.call_tool(owner, name, params)
        except Exception as e:
            logger.warning(f"Error calling tool {name} ({owner}) with {arguments!r}: {e}")
            return build_tool_error_message(name, arguments, e)

        logger.debug(f"Extracted output for {name}: {output}")
        return output
