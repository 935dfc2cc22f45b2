"""Reading and writing chat-mode transcripts.

Chat mode exchanges the whole conversation as a JSON array of message objects
on stdin/stdout.
"""

import json
import logging

from gwendoline.conversation.types import ConversationMessage
from gwendoline.errors import ConversationParseError

logger = logging.getLogger(__name__)


def parse_conversation(text: str) -> list[ConversationMessage]:
    """Parse a serialized conversation.

    Empty input is treated as an empty conversation.

    Args:
        text: JSON array of message objects

    Returns:
        List of messages in their original order

    Raises:
        ConversationParseError: If the text is not a JSON array of valid messages
    """
    text = text.strip() or "[]"

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConversationParseError(f"Input is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ConversationParseError(
            f"Expected a JSON array of messages, got {type(data).__name__}"
        )

    messages = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConversationParseError(f"Message {index} is not an object")
        try:
            messages.append(ConversationMessage.from_dict(item))
        except ValueError as e:
            raise ConversationParseError(f"Message {index} is invalid: {e}") from e

    logger.debug(f"Parsed conversation with {len(messages)} messages")
    return messages


def serialize_conversation(messages: list[ConversationMessage]) -> str:
    """Serialize a conversation to a compact JSON array."""
    return json.dumps(
        [message.to_dict() for message in messages],
        ensure_ascii=False,
        separators=(",", ":"),
    )
