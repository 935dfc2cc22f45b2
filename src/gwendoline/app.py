"""Run assembly.

This module wires one run together: it loads the agent file and system
prompt, connects to MCP servers, builds the tool registry, runs the
conversation loop, and closes the servers again.
"""

import logging
from dataclasses import dataclass

from gwendoline.agents import ConversationLoop, LoopOptions
from gwendoline.agents.streaming import Sink, stdout_sink
from gwendoline.config import GwendolineSettings
from gwendoline.conversation import ConversationMessage, parse_conversation
from gwendoline.ollama import OllamaClient
from gwendoline.providers import ProviderConnectionManager, load_provider_descriptors
from gwendoline.services import SystemPromptService, load_agent
from gwendoline.tools import ToolRegistry, default_tools

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Command-line options of one run."""

    cloud: bool = False
    model: str | None = None
    use_mcp: bool = False
    chat: bool = False
    stream: bool = False
    thinking: bool = False
    agent_file: str | None = None


def build_messages(input_text: str, chat: bool) -> list[ConversationMessage]:
    """Build the initial conversation from stdin content.

    Raises:
        ConversationParseError: If chat input is not a valid conversation
    """
    if chat:
        return parse_conversation(input_text)
    return [ConversationMessage.user(input_text.strip())]


async def connect_providers(settings: GwendolineSettings) -> ProviderConnectionManager:
    """Connect to the MCP servers declared in the configuration file."""
    descriptors = load_provider_descriptors(settings.resolved_mcp_config_path)
    manager = ProviderConnectionManager(
        descriptors, request_timeout=settings.tool_call_timeout
    )
    await manager.connect_all()
    return manager


async def run(
    settings: GwendolineSettings,
    options: RunOptions,
    input_text: str,
    sink: Sink = stdout_sink,
) -> str:
    """Execute one run and return the output for stdout.

    Args:
        settings: Application settings
        options: Command-line options
        input_text: Raw prompt, or a JSON conversation in chat mode
        sink: Where streamed fragments are written

    Returns:
        str: Answer text, or the conversation as JSON in chat mode

    Raises:
        ConversationParseError: If chat input is not a valid conversation
    """
    messages = build_messages(input_text, options.chat)

    agent_path = settings.resolved_agent_path
    if options.agent_file:
        agent_path = agent_path.parent / options.agent_file
    agent = load_agent(agent_path)

    model = options.model or agent.model or settings.resolve_model(options.cloud)
    logger.info(f"Using model {model}")

    system_prompt = SystemPromptService(settings.resolved_system_prompt_path).resolve(
        as_agent=bool(agent.body)
    )

    providers = await connect_providers(settings) if options.use_mcp else None
    try:
        registry = ToolRegistry(providers=providers)
        for tool in default_tools():
            registry.register(tool)
        registry.register_providers()
        logger.debug(f"Available tools: {registry.tool_names}")

        client = OllamaClient(
            host=settings.ollama_host,
            user_agent=settings.user_agent,
            api_key=settings.ollama_api_key,
        )
        loop = ConversationLoop(
            client=client,
            registry=registry,
            options=LoopOptions(
                model=model,
                stream=options.stream,
                return_conversation=options.chat,
                show_thinking=options.thinking,
                max_iterations=settings.max_tool_iterations,
                backend_timeout=settings.backend_timeout,
            ),
            system_prompt=system_prompt,
            agent_prompt=agent.body,
            instructions=providers.get_instructions() if providers else "",
            sink=sink,
        )
        return await loop.run(messages)
    finally:
        if providers is not None:
            await providers.close()
