"""Integration tests for gwendoline.app.run.

Each test runs a complete run: agent and prompt files are read from a
temporary working directory and the backend is the mocked OllamaClient.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from gwendoline.app import RunOptions, run
from gwendoline.errors import ConversationParseError
from gwendoline.providers import ProviderConnectionManager
from gwendoline.services.prompts import DEFAULT_AGENT_SYSTEM_PROMPT, DEFAULT_SYSTEM_PROMPT
from tests.helpers import chat_response, tool_call


def sent(mock_ollama_client, index=0):
    return mock_ollama_client.chat.call_args_list[index].kwargs


def quiet(text):
    pass


class TestPromptFlow:
    @pytest.mark.asyncio
    async def test_default_run(self, test_settings, mock_ollama_client):
        """Test a plain prompt with the default model, prompt and tools."""
        result = await run(test_settings, RunOptions(), "What is the capital of France?\n")

        assert result == "Hello from the model."
        request = sent(mock_ollama_client)
        assert request["model"] == "qwen3:4b"
        assert request["messages"] == [
            {"role": "system", "content": DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": "What is the capital of France?"},
        ]
        names = [tool["function"]["name"] for tool in request["tools"]]
        assert names == ["getConditions", "getTemperature", "internalUtcTime"]

    @pytest.mark.asyncio
    async def test_weather_question(self, test_settings, mock_ollama_client):
        """Test a weather question answered through a tool call."""
        mock_ollama_client.chat.side_effect = [
            chat_response(tool_calls=[tool_call("getConditions", {"city": "Paris"})]),
            chat_response("<think>the tool said so</think>It is sunny in Paris."),
        ]

        result = await run(test_settings, RunOptions(), "What's the weather in Paris?")

        assert result == "It is sunny in Paris."
        tool_message = sent(mock_ollama_client, 1)["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["tool_name"] == "getConditions"

    @pytest.mark.asyncio
    async def test_cloud_model(self, test_settings, mock_ollama_client):
        """Test that --cloud selects the cloud model."""
        await run(test_settings, RunOptions(cloud=True), "hi")
        assert sent(mock_ollama_client)["model"] == "gpt-oss:120b-cloud"

    @pytest.mark.asyncio
    async def test_system_prompt_override(self, test_settings, mock_ollama_client):
        """Test that SYSTEM_PROMPT.md replaces the default system prompt."""
        test_settings.resolved_system_prompt_path.write_text("Answer in French.", encoding="utf-8")

        await run(test_settings, RunOptions(), "hi")

        assert sent(mock_ollama_client)["messages"][0] == {
            "role": "system",
            "content": "Answer in French.",
        }

    @pytest.mark.asyncio
    async def test_streaming_run(self, test_settings, mock_ollama_client):
        """Test that a streaming run writes to the sink."""
        async def chunks(**kwargs):
            yield {"message": {"content": "Bonjour"}, "done": False}
            yield {"message": {"content": "!"}, "done": True}

        mock_ollama_client.chat_stream = chunks
        written = []

        result = await run(test_settings, RunOptions(stream=True), "hi", sink=written.append)

        assert result == ""
        assert "".join(written) == "Bonjour!"


class TestAgentFiles:
    @pytest.mark.asyncio
    async def test_agent_file_in_working_dir(self, test_settings, mock_ollama_client):
        """Test that AGENT.md sets the agent prompt and model."""
        test_settings.resolved_agent_path.write_text(
            "---\nname: reporter\nmodel: 'qwen3:8b'\n---\nYou report the weather.",
            encoding="utf-8",
        )

        await run(test_settings, RunOptions(), "Weather in Tokyo?")

        request = sent(mock_ollama_client)
        assert request["model"] == "qwen3:8b"
        assert request["messages"][:2] == [
            {"role": "system", "content": "You report the weather."},
            {"role": "system", "content": DEFAULT_AGENT_SYSTEM_PROMPT},
        ]

    @pytest.mark.asyncio
    async def test_model_flag_beats_agent(self, test_settings, mock_ollama_client):
        """Test that --model wins over the agent file model."""
        test_settings.resolved_agent_path.write_text(
            "---\nmodel: 'qwen3:8b'\n---\nBody", encoding="utf-8"
        )

        await run(test_settings, RunOptions(model="llama3.2"), "hi")

        assert sent(mock_ollama_client)["model"] == "llama3.2"

    @pytest.mark.asyncio
    async def test_named_agent_file(self, test_settings, mock_ollama_client):
        """Test loading an agent file given by name."""
        agent_path = test_settings.resolved_agent_path.parent / "reviewer.md"
        agent_path.write_text("Review the code.", encoding="utf-8")

        await run(test_settings, RunOptions(agent_file="reviewer.md"), "hi")

        assert sent(mock_ollama_client)["messages"][0] == {
            "role": "system",
            "content": "Review the code.",
        }


class TestChatMode:
    @pytest.mark.asyncio
    async def test_round_trip(self, test_settings, mock_ollama_client):
        """Test that chat mode returns the input plus the answer."""
        mock_ollama_client.chat.return_value = chat_response("Hi there!")

        output = await run(test_settings, RunOptions(chat=True), '[{"role":"user","content":"hi"}]')

        assert json.loads(output) == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "Hi there!"},
        ]

    @pytest.mark.asyncio
    async def test_chat_mode_ignores_stream(self, test_settings, mock_ollama_client):
        """Test that --stream is ignored in chat mode."""
        output = await run(
            test_settings,
            RunOptions(chat=True, stream=True),
            '[{"role":"user","content":"hi"}]',
            sink=quiet,
        )

        assert json.loads(output)[-1]["role"] == "assistant"
        mock_ollama_client.chat.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_malformed_input(self, test_settings, mock_ollama_client):
        """Test that malformed chat input fails before any backend call."""
        with pytest.raises(ConversationParseError):
            await run(test_settings, RunOptions(chat=True), "not json")

        mock_ollama_client.chat.assert_not_called()


class TestMcp:
    @pytest.mark.asyncio
    async def test_missing_config_keeps_internal_tools(self, test_settings, mock_ollama_client):
        """Test that a missing mcp.json leaves only internal tools."""
        result = await run(test_settings, RunOptions(use_mcp=True), "hi")

        assert result == "Hello from the model."
        assert len(sent(mock_ollama_client)["tools"]) == 3

    @pytest.mark.asyncio
    async def test_provider_tools_and_instructions(self, test_settings, mock_ollama_client):
        """Test that server instructions reach the backend request."""
        test_settings.resolved_mcp_config_path.write_text(
            json.dumps({"servers": {"time": {"type": "stdio", "command": "uvx", "args": ["mcp-server-time"]}}}),
            encoding="utf-8",
        )
        session = AsyncMock()
        session.initialize.return_value.instructions = "Times are in UTC."
        session.list_tools.return_value.tools = []
        session.list_resources.return_value.resources = []

        with patch.object(
            ProviderConnectionManager, "_open_stdio", AsyncMock(return_value=session)
        ):
            await run(test_settings, RunOptions(use_mcp=True), "What time is it?")

        user_message = sent(mock_ollama_client)["messages"][-1]
        assert user_message["content"] == (
            "[MCP Server Instructions]\n## time\nTimes are in UTC.\n\n"
            "[User Request]\nWhat time is it?"
        )
