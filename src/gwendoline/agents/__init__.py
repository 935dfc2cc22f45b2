"""Conversation loop and stream handling.

This package contains the loop that alternates model turns with tool
execution, and the aggregator used when responses are streamed.
"""

from gwendoline.agents.loop import ConversationLoop, LoopOptions, strip_reasoning
from gwendoline.agents.streaming import StreamAggregator

__all__ = ["ConversationLoop", "LoopOptions", "StreamAggregator", "strip_reasoning"]
