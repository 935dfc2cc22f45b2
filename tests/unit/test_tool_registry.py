"""Unit tests for the ToolRegistry."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from gwendoline.errors import ToolArgumentError
from gwendoline.providers import ProviderConnection, ProviderDescriptor, ProviderState, ToolDefinition
from gwendoline.tools import GetConditionsTool, Tool, ToolRegistry, default_tools, normalize_arguments


class ExplodingTool(Tool):
    @property
    def name(self) -> str:
        return "explode"

    @property
    def description(self) -> str:
        return "Always fails"

    @property
    def parameters(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    def execute(self, **kwargs: Any) -> str:
        raise RuntimeError("kaboom")


def make_connection(provider_id: str, *tool_names: str) -> ProviderConnection:
    connection = ProviderConnection(
        descriptor=ProviderDescriptor(id=provider_id, transport="stdio", command="x"),
        tools=[ToolDefinition(name=name, description=f"{name} tool") for name in tool_names],
    )
    connection.state = ProviderState.CONNECTED
    return connection


@pytest.fixture
def providers():
    """Mock connection manager with two connected servers."""
    manager = MagicMock()
    manager.connected.return_value = [
        make_connection("time", "current_time", "getConditions"),
        make_connection("fetch", "fetch", "current_time"),
    ]
    manager.call_tool = AsyncMock(return_value="12:00")
    return manager


@pytest.fixture
def registry(providers):
    registry = ToolRegistry(providers=providers)
    for tool in default_tools():
        registry.register(tool)
    registry.register_providers()
    return registry


class TestNormalizeArguments:
    def test_dict(self):
        """Test that dict arguments are used as is."""
        assert normalize_arguments({"city": "Paris"}) == {"city": "Paris"}

    def test_json_string(self):
        """Test that JSON string arguments are parsed."""
        assert normalize_arguments('{"city": "Paris"}') == {"city": "Paris"}

    def test_missing(self):
        """Test that missing arguments become an empty dict."""
        assert normalize_arguments(None) == {}
        assert normalize_arguments("  ") == {}

    def test_invalid_json(self):
        """Test that invalid JSON arguments raise ToolArgumentError."""
        with pytest.raises(ToolArgumentError, match="not valid JSON"):
            normalize_arguments('{"city": ')

    def test_not_an_object(self):
        """Test that non-object arguments raise ToolArgumentError."""
        with pytest.raises(ToolArgumentError, match="must be an object"):
            normalize_arguments("[1, 2]")


class TestRegistration:
    def test_catalogue_order(self, registry):
        """Test that definitions keep registration order."""
        assert registry.tool_names == [
            "getConditions",
            "getTemperature",
            "internalUtcTime",
            "current_time",
            "fetch",
        ]
        assert [d["function"]["name"] for d in registry.get_definitions()] == registry.tool_names

    def test_first_registered_wins(self, registry):
        """Test that a later tool with the same name is skipped."""
        assert registry.owner_of("getConditions") == "internal"
        assert registry.owner_of("current_time") == "time"
        assert registry.owner_of("fetch") == "fetch"

    def test_duplicate_internal_tool_skipped(self):
        """Test that registering an internal tool twice is refused."""
        registry = ToolRegistry()
        assert registry.register(GetConditionsTool()) is True
        assert registry.register(GetConditionsTool()) is False
        assert len(registry) == 1

    def test_register_providers_without_manager(self):
        """Test registering providers when there is no manager."""
        registry = ToolRegistry()
        registry.register_providers()
        assert len(registry) == 0

    def test_provider_tool_schema_defaults(self, registry):
        """Test the default parameters of a provider tool without a schema."""
        definition = next(
            d for d in registry.get_definitions() if d["function"]["name"] == "fetch"
        )
        assert definition["function"]["parameters"] == {"type": "object", "properties": {}}


class TestExecute:
    @pytest.mark.asyncio
    async def test_internal_shadows_provider(self, registry, providers):
        """Test that an internal tool shadows a provider tool of the same name."""
        with patch.object(GetConditionsTool, "execute", return_value="rainy") as execute:
            result = await registry.execute("getConditions", {"city": "London"})

        assert result == "rainy"
        execute.assert_called_once_with(city="London")
        providers.call_tool.assert_not_called()

    @pytest.mark.asyncio
    async def test_internal_json_result(self, registry):
        """Test that structured internal results are JSON-encoded."""
        result = await registry.execute("internalUtcTime", None)
        assert '"timestamp"' in result

    @pytest.mark.asyncio
    async def test_provider_exact_owner(self, registry, providers):
        """Test that provider tools are sent only to their owner."""
        result = await registry.execute("current_time", '{"timezone": "UTC"}')

        assert result == "12:00"
        providers.call_tool.assert_awaited_once_with(
            "time", "current_time", {"timezone": "UTC"}
        )

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry, providers):
        """Test the message for an unknown tool."""
        result = await registry.execute("launch_rocket", {})

        assert result == (
            "Tool 'launch_rocket' not found. Available tools: "
            "getConditions, getTemperature, internalUtcTime, current_time, fetch"
        )
        providers.call_tool.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_message(self, registry, providers):
        """Test that a provider failure becomes an error message."""
        providers.call_tool.side_effect = RuntimeError("connection reset")

        result = await registry.execute("fetch", {"url": "https://example.com"})

        assert result.startswith("Tool 'fetch' failed with error: connection reset")

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_message(self):
        """Test that a handler exception becomes an error message."""
        registry = ToolRegistry()
        registry.register(ExplodingTool())

        result = await registry.execute("explode", {})

        assert "Tool 'explode' failed with error: kaboom" in result

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "arguments",
        [None, "", "not json", "[1]", 42, {"city": None}, {}],
    )
    async def test_bad_arguments_never_raise(self, registry, arguments):
        """Test that malformed arguments never raise."""
        result = await registry.execute("getTemperature", arguments)
        assert isinstance(result, str)
        assert "getTemperature" in result

    @pytest.mark.asyncio
    async def test_missing_argument_lists_parameter(self, registry):
        """Test that a missing argument is listed as a parameter issue."""
        result = await registry.execute("getTemperature", {})
        assert "- Parameter 'city': Required (expected: string)" in result
