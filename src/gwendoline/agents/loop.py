"""The conversation loop.

ConversationLoop drives one run: it puts the system context in front of the
conversation, asks the model for a turn, executes the requested tools through
the ToolRegistry, appends their results, and asks again until a turn requests
no tools. Tools of one turn run one after another, in request order.
"""

import asyncio
import logging
import re
import sys
from dataclasses import dataclass
from typing import Any

from gwendoline.agents.streaming import Sink, StreamAggregator, stdout_sink
from gwendoline.conversation import (
    ConversationMessage,
    has_system_message,
    serialize_conversation,
)
from gwendoline.ollama import OllamaClient, TurnOutcome, turn_from_response
from gwendoline.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

THINK_BLOCK_PATTERN = re.compile(r"<think>.*?</think>", re.IGNORECASE | re.DOTALL)
THINK_TAIL_PATTERN = re.compile(r".*?</think>", re.IGNORECASE | re.DOTALL)

TURN_SEPARATOR = "\n================\n"

# Message keys, besides role/content/tool_name, that Ollama understands.
_OLLAMA_MESSAGE_KEYS = ("images", "thinking", "tool_calls")


def strip_reasoning(content: str) -> str:
    """Remove <think> blocks, and anything before a stray </think>."""
    content = THINK_BLOCK_PATTERN.sub("", content).strip()
    return THINK_TAIL_PATTERN.sub("", content).strip()


def _to_ollama_message(message: ConversationMessage, content: str | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "role": message.role,
        "content": message.content if content is None else content,
    }
    for key in _OLLAMA_MESSAGE_KEYS:
        if key in message.extra:
            data[key] = message.extra[key]
    if message.tool_name is not None:
        data["tool_name"] = message.tool_name
    return data


@dataclass
class LoopOptions:
    """Settings of one conversation loop run.

    Attributes:
        model: Ollama model name
        stream: Stream the answer to the sink as it is generated
        return_conversation: Return the whole conversation as JSON instead
            of the answer text
        show_thinking: Keep reasoning visible
        max_iterations: Maximum number of tool turns before giving up
        backend_timeout: Deadline in seconds for one backend turn
    """

    model: str
    stream: bool = False
    return_conversation: bool = False
    show_thinking: bool = False
    max_iterations: int = 25
    backend_timeout: float | None = 300.0

    @property
    def streaming(self) -> bool:
        # Streamed output can't be combined with returning the conversation.
        return self.stream and not self.return_conversation


class ConversationLoop:
    """Runs the model/tool loop for one conversation."""

    def __init__(
        self,
        client: OllamaClient,
        registry: ToolRegistry,
        options: LoopOptions,
        system_prompt: str = "",
        agent_prompt: str = "",
        instructions: str = "",
        sink: Sink = stdout_sink,
    ) -> None:
        self.client = client
        self.registry = registry
        self.options = options
        self.system_prompt = system_prompt
        self.agent_prompt = agent_prompt
        self.instructions = instructions
        self.aggregator = StreamAggregator(sink=sink, show_thinking=options.show_thinking)
        self._context: list[ConversationMessage] = []
        self._prefix_first_user = False

    async def run(self, messages: list[ConversationMessage]) -> str:
        """Run the loop until the model answers without requesting tools.

        Args:
            messages: The conversation; tool results and the final assistant
                      message are appended to it in place

        Returns:
            str: The answer text, the conversation as JSON when
                 return_conversation is set, an empty string when streaming,
                 or "Error: ..." if talking to the backend failed
        """
        try:
            return await self._run(messages)
        except Exception as e:
            logger.error(f"Backend request failed: {e}")
            return f"Error: {str(e) or type(e).__name__}"

    async def _run(self, messages: list[ConversationMessage]) -> str:
        self._inject_context(messages)
        tools = self.registry.get_definitions()

        iteration = 0
        while True:
            outcome = await self._turn(messages, tools)
            if not outcome.has_tool_calls:
                return self._finish(messages, outcome.content)

            iteration += 1
            logger.debug(
                f"Turn {iteration} requested tools: {[call.name for call in outcome.tool_calls]}"
            )
            for call in outcome.tool_calls:
                result = await self.registry.execute(call.name, call.arguments)
                messages.append(ConversationMessage.tool(call.name, result))

            if self.options.streaming:
                print(TURN_SEPARATOR, file=sys.stderr, flush=True)

            if iteration >= self.options.max_iterations:
                logger.warning(f"Stopped after {iteration} tool iterations")
                final = f"Reached {iteration} tool iterations without a final answer."
                if self.options.streaming:
                    self.aggregator.sink(final)
                return self._finish(messages, final)

    def _inject_context(self, messages: list[ConversationMessage]) -> None:
        """Decide the system context, once per run.

        Nothing is injected if the conversation already has a system message.
        The injected messages precede the conversation in every backend
        request but are not part of the conversation itself.
        """
        if has_system_message(messages):
            return

        context = []
        if self.agent_prompt:
            context.append(ConversationMessage.system(self.agent_prompt))
        if self.system_prompt:
            context.append(ConversationMessage.system(self.system_prompt))
        self._context = context
        self._prefix_first_user = bool(self.instructions)

    def _build_request(self, messages: list[ConversationMessage]) -> list[dict[str, Any]]:
        request = [_to_ollama_message(message) for message in self._context]
        prefixed = not self._prefix_first_user
        for message in messages:
            if not prefixed and message.role == "user":
                content = (
                    f"[MCP Server Instructions]\n{self.instructions}\n\n"
                    f"[User Request]\n{message.content}"
                )
                request.append(_to_ollama_message(message, content=content))
                prefixed = True
            else:
                request.append(_to_ollama_message(message))
        return request

    async def _turn(
        self, messages: list[ConversationMessage], tools: list[dict[str, Any]]
    ) -> TurnOutcome:
        request = self._build_request(messages)

        if self.options.streaming:
            fragments = self.client.chat_stream(
                model=self.options.model,
                messages=request,
                tools=tools,
                think=self.options.show_thinking,
            )
            return await asyncio.wait_for(
                self.aggregator.consume(fragments), self.options.backend_timeout
            )

        response = await asyncio.wait_for(
            self.client.chat(model=self.options.model, messages=request, tools=tools),
            self.options.backend_timeout,
        )
        return turn_from_response(response)

    def _finish(self, messages: list[ConversationMessage], content: str) -> str:
        if self.options.streaming:
            return ""

        if not self.options.show_thinking:
            content = strip_reasoning(content)

        if self.options.return_conversation:
            messages.append(ConversationMessage.assistant(content))
            return serialize_conversation(messages)

        return content
