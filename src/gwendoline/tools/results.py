"""Rendering tool results as tool-message text."""

import json
from typing import Any


def render_tool_result(result: Any) -> str:
    """Render a tool result as text for the model.

    MCP-shaped results ({"content": [...]}) become their text items joined by
    newlines, with non-text items JSON-encoded. Strings pass through and
    anything else is JSON-encoded.
    """
    if isinstance(result, str):
        return result

    if isinstance(result, dict) and isinstance(result.get("content"), list):
        parts = []
        for item in result["content"]:
            if isinstance(item, dict) and item.get("text"):
                parts.append(item["text"])
            else:
                parts.append(json.dumps(item, ensure_ascii=False, default=str))
        return "\n".join(parts)

    return json.dumps(result, ensure_ascii=False, default=str)
