"""Reassembling streamed chat responses.

The StreamAggregator reads Ollama stream chunks, forwards text (and reasoning,
when visible) to an output sink as it arrives, and reduces the stream to the
same TurnOutcome a non-streaming response would give.

A chunk carrying tool calls ends the turn: the stream is closed right away, so
nothing the model generates after requesting tools is ever written.
"""

import logging
import sys
from typing import Any, AsyncIterator, Callable

from gwendoline.ollama.types import TurnOutcome, parse_tool_calls

logger = logging.getLogger(__name__)

Sink = Callable[[str], None]


def stdout_sink(text: str) -> None:
    """Write a fragment to stdout immediately."""
    sys.stdout.write(text)
    sys.stdout.flush()


class StreamAggregator:
    """Forwards streamed fragments and collects the turn outcome.

    Attributes:
        sink: Callable receiving each text fragment exactly once, in order
        show_thinking: Whether reasoning fragments are forwarded too
    """

    def __init__(self, sink: Sink = stdout_sink, show_thinking: bool = False) -> None:
        self.sink = sink
        self.show_thinking = show_thinking

    async def consume(self, fragments: AsyncIterator[dict[str, Any]]) -> TurnOutcome:
        """Consume a chunk stream until it is done or requests tools.

        Args:
            fragments: Chunks as yielded by OllamaClient.chat_stream()

        Returns:
            TurnOutcome: Collected content, reasoning and tool calls
        """
        outcome = TurnOutcome()
        content_parts: list[str] = []
        thinking_parts: list[str] = []

        try:
            async for chunk in fragments:
                message = chunk.get("message") or {}

                thinking = message.get("thinking")
                if thinking:
                    thinking_parts.append(thinking)
                    if self.show_thinking:
                        self.sink(thinking)

                content = message.get("content")
                if content:
                    content_parts.append(content)
                    self.sink(content)

                tool_calls = parse_tool_calls(message)
                if tool_calls:
                    logger.debug(f"Stream requested {len(tool_calls)} tool calls")
                    outcome.tool_calls = tool_calls
                    break

                if chunk.get("done"):
                    break
        finally:
            aclose = getattr(fragments, "aclose", None)
            if aclose is not None:
                await aclose()

        outcome.content = "".join(content_parts)
        outcome.thinking = "".join(thinking_parts)
        return outcome
