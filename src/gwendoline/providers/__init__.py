"""MCP server configuration and connection management.

This package reads the declared MCP servers, connects to them, and forwards
tool calls to the server that owns each tool.
"""

from gwendoline.providers.config import McpConfig, load_provider_descriptors
from gwendoline.providers.manager import ProviderConnectionManager
from gwendoline.providers.types import (
    ProviderConnection,
    ProviderDescriptor,
    ProviderState,
    ToolDefinition,
)

__all__ = [
    "McpConfig",
    "ProviderConnection",
    "ProviderConnectionManager",
    "ProviderDescriptor",
    "ProviderState",
    "ToolDefinition",
    "load_provider_descriptors",
]
