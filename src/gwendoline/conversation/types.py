"""Data types for conversations.

A conversation is the ordered, append-only list of messages exchanged during
one run. Unknown keys supplied by the caller in chat mode are kept in
``extra`` so the transcript can be written back out unchanged.
"""

from dataclasses import dataclass, field
from typing import Any

VALID_ROLES = ("system", "user", "assistant", "tool")


@dataclass
class ConversationMessage:
    """A single message of the transcript."""

    role: str
    content: str = ""
    tool_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the role."""
        if self.role not in VALID_ROLES:
            raise ValueError(f"Unknown message role: {self.role}")

    @classmethod
    def system(cls, content: str) -> "ConversationMessage":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "ConversationMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "ConversationMessage":
        return cls(role="assistant", content=content)

    @classmethod
    def tool(cls, tool_name: str, content: str) -> "ConversationMessage":
        return cls(role="tool", content=content, tool_name=tool_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert the message to the dict shape used on the wire.

        Key order is role, content, caller-supplied extras, tool_name.
        """
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        data.update(self.extra)
        if self.tool_name is not None:
            data["tool_name"] = self.tool_name
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationMessage":
        """Create a message from a dict.

        Raises:
            ValueError: If the role is unknown or content is not a string
        """
        role = data.get("role")
        content = data.get("content", "")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise ValueError(f"Message content must be a string, got {type(content).__name__}")

        tool_name = data.get("tool_name")
        extra = {
            key: value
            for key, value in data.items()
            if key not in ("role", "content", "tool_name")
        }
        return cls(role=role, content=content, tool_name=tool_name, extra=extra)


def has_system_message(messages: list[ConversationMessage]) -> bool:
    """Check whether any message in the list has the system role."""
    return any(message.role == "system" for message in messages)
