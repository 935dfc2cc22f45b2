"""Exception types shared across gwendoline.

Only ConversationParseError is fatal for a run. Everything raised while
dispatching a tool is converted into a tool-result message by the tool
registry.
"""

from typing import Any


class GwendolineError(Exception):
    """Base class for all gwendoline errors."""


class ConversationParseError(GwendolineError):
    """Raised when chat-mode input cannot be parsed into messages."""


class ToolArgumentError(GwendolineError):
    """Raised when tool arguments cannot be normalized or fail validation.

    Attributes:
        issues: Per-parameter complaints, each a dict with ``path``,
            ``message`` and optionally ``expected``.
    """

    def __init__(self, message: str, issues: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.issues = issues or []


class ProviderToolError(GwendolineError):
    """Raised when an MCP server reports a failed tool call."""


class ProviderNotConnectedError(GwendolineError):
    """Raised when a call targets a provider that is not connected."""
