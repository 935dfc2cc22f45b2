"""Loading the MCP server configuration file.

The file holds a "servers" mapping from server id to a declaration:

    {
        "servers": {
            "time": {"type": "stdio", "command": "uvx", "args": ["mcp-server-time"]},
            "fetch": {"type": "http", "url": "https://remote.mcpservers.org/fetch/mcp"}
        }
    }
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, ValidationError

from gwendoline.providers.types import ProviderDescriptor

logger = logging.getLogger(__name__)


class StdioServerConfig(BaseModel):
    """A server spawned as a subprocess and spoken to over stdin/stdout."""

    type: Literal["stdio"]
    command: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] | None = None


class RemoteServerConfig(BaseModel):
    """A server reached over HTTP (streamable HTTP or legacy SSE)."""

    type: Literal["http", "sse"]
    url: str = Field(min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)


ServerConfig = Annotated[
    StdioServerConfig | RemoteServerConfig, Field(discriminator="type")
]


class McpConfig(BaseModel):
    """Top-level MCP configuration document."""

    servers: dict[str, ServerConfig] = Field(default_factory=dict)


def descriptors_from_config(config: McpConfig) -> list[ProviderDescriptor]:
    """Turn a validated configuration into descriptors, in declaration order."""
    descriptors = []
    for server_id, server in config.servers.items():
        if isinstance(server, StdioServerConfig):
            descriptors.append(
                ProviderDescriptor(
                    id=server_id,
                    transport="stdio",
                    command=server.command,
                    args=list(server.args),
                    env=server.env,
                )
            )
        else:
            descriptors.append(
                ProviderDescriptor(
                    id=server_id,
                    transport=server.type,
                    url=server.url,
                    headers=dict(server.headers),
                )
            )
    return descriptors


def load_provider_descriptors(path: Path) -> list[ProviderDescriptor]:
    """Read the MCP configuration file.

    A missing or invalid file is logged and yields no servers; the run then
    continues with internal tools only.

    Args:
        path: Path to the configuration file

    Returns:
        List of declared servers in declaration order
    """
    if not path.exists():
        logger.warning(f"MCP configuration not found: {path}")
        return []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        config = McpConfig.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid MCP configuration {path}: {e}")
        return []

    descriptors = descriptors_from_config(config)
    logger.debug(f"Loaded {len(descriptors)} MCP server declarations from {path}")
    return descriptors
