"""Conversation transcript types and chat-mode serialization.

This package provides the message type shared by the conversation loop and
the helpers that read and write chat-mode transcripts.
"""

from gwendoline.conversation.serialization import (
    parse_conversation,
    serialize_conversation,
)
from gwendoline.conversation.types import ConversationMessage, has_system_message

__all__ = [
    "ConversationMessage",
    "has_system_message",
    "parse_conversation",
    "serialize_conversation",
]
