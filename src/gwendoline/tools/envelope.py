"""Model-readable error messages for failed tool calls.

When a tool call fails, the model gets a tool-result message describing what
went wrong so it can retry with corrected arguments. Validation complaints are
pulled out of structured errors (ToolArgumentError, pydantic ValidationError)
and out of JSON issue lists embedded in error strings, which is how MCP servers
built on zod report invalid arguments.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from gwendoline.errors import ToolArgumentError

logger = logging.getLogger(__name__)

RETRY_HINT = "Please check the tool parameters and try again with corrected values."


def describe_error(error: Any) -> str:
    """Return a best-effort human-readable cause for a failure value."""
    if error is None:
        return "Unknown error"
    if isinstance(error, str):
        return error or "Unknown error"
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return str(error)


def _issue_from_dict(data: dict[str, Any]) -> dict[str, Any] | None:
    """Normalize one embedded validation issue, or None if it isn't one."""
    message = data.get("message") or data.get("msg")
    if not isinstance(message, str):
        return None

    path = data.get("path", data.get("loc"))
    if isinstance(path, (list, tuple)):
        path = ".".join(str(part) for part in path)

    return {
        "path": path if path not in (None, "") else "parameter",
        "message": message,
        "expected": data.get("expected"),
    }


def _issues_from_text(text: str) -> list[dict[str, Any]]:
    """Find the first JSON array of validation issues inside an error string."""
    decoder = json.JSONDecoder()
    start = text.find("[")
    while start != -1:
        try:
            candidate, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            candidate = None

        if isinstance(candidate, list) and candidate and all(
            isinstance(item, dict) for item in candidate
        ):
            issues = [_issue_from_dict(item) for item in candidate]
            if all(issue is not None for issue in issues):
                return issues

        start = text.find("[", start + 1)
    return []


def extract_parameter_issues(error: Any, message: str) -> list[dict[str, Any]]:
    """Collect per-parameter validation complaints from a failure value."""
    if isinstance(error, ToolArgumentError) and error.issues:
        return [_issue_from_dict(issue) or issue for issue in error.issues]

    if isinstance(error, ValidationError):
        return [
            {
                "path": ".".join(str(part) for part in item.get("loc", ())) or "parameter",
                "message": item.get("msg", ""),
                "expected": item.get("type"),
            }
            for item in error.errors()
        ]

    return _issues_from_text(message)


def _format_arguments(arguments: Any) -> str:
    if isinstance(arguments, str):
        return arguments
    try:
        return json.dumps(arguments, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(arguments)


def build_tool_error_message(tool_name: str, arguments: Any, error: Any) -> str:
    """Build the tool-result text for a failed tool call.

    This function never raises.

    Args:
        tool_name: Name of the tool that failed
        arguments: Arguments as supplied by the model
        error: Exception, string or any other failure value

    Returns:
        str: Message naming the tool, the cause, any parameter issues, the
             supplied arguments and a request to retry
    """
    try:
        message = describe_error(error)
        issues = extract_parameter_issues(error, message)
    except Exception as e:
        logger.debug(f"Could not analyze error for tool {tool_name}: {e}")
        message, issues = repr(error), []

    parts = [f"Tool '{tool_name}' failed with error: {message}"]

    if issues:
        lines = []
        for issue in issues:
            line = f"- Parameter '{issue['path']}': {issue['message']}"
            if issue.get("expected"):
                line += f" (expected: {issue['expected']})"
            lines.append(line)
        parts.append("Parameter issues:\n" + "\n".join(lines))

    parts.append(f"Provided arguments: {_format_arguments(arguments)}")
    parts.append(RETRY_HINT)
    return "\n\n".join(parts)
