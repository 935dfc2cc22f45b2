"""Unit tests for loading the MCP server configuration."""

import json

from gwendoline.providers import load_provider_descriptors


def write_config(tmp_path, data) -> "object":
    path = tmp_path / "mcp.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


def test_load_mixed_servers(tmp_path):
    """Test loading stdio and network servers in order."""
    path = write_config(
        tmp_path,
        {
            "servers": {
                "time": {"type": "stdio", "command": "uvx", "args": ["mcp-server-time"]},
                "fetch": {"type": "http", "url": "https://remote.mcpservers.org/fetch/mcp"},
                "legacy": {"type": "sse", "url": "http://localhost:9000/sse", "headers": {"X-Key": "1"}},
            }
        },
    )

    descriptors = load_provider_descriptors(path)

    assert [d.id for d in descriptors] == ["time", "fetch", "legacy"]
    assert descriptors[0].transport == "stdio"
    assert descriptors[0].command == "uvx"
    assert descriptors[0].args == ["mcp-server-time"]
    assert descriptors[0].is_network is False
    assert descriptors[1].transport == "http"
    assert descriptors[1].is_network is True
    assert descriptors[2].headers == {"X-Key": "1"}


def test_stdio_args_default_to_empty(tmp_path):
    """Test that stdio args default to an empty list."""
    path = write_config(tmp_path, {"servers": {"local": {"type": "stdio", "command": "./server"}}})
    assert load_provider_descriptors(path)[0].args == []


def test_missing_file(tmp_path):
    """Test that a missing file yields no servers."""
    assert load_provider_descriptors(tmp_path / "nope.json") == []


def test_invalid_json(tmp_path):
    """Test that invalid JSON yields no servers."""
    assert load_provider_descriptors(write_config(tmp_path, "{not json")) == []


def test_unknown_transport(tmp_path):
    """Test that an unknown transport type is rejected."""
    path = write_config(tmp_path, {"servers": {"x": {"type": "carrier-pigeon", "url": "coo"}}})
    assert load_provider_descriptors(path) == []


def test_stdio_without_command(tmp_path):
    """Test that a stdio server needs a command."""
    path = write_config(tmp_path, {"servers": {"x": {"type": "stdio"}}})
    assert load_provider_descriptors(path) == []


def test_no_servers(tmp_path):
    """Test a configuration without servers."""
    assert load_provider_descriptors(write_config(tmp_path, {})) == []
