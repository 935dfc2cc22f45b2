"""Base class for internal tools.

Internal tools run in-process and synchronously. Each one declares a JSON
schema for its parameters; arguments are validated against that schema
before the handler runs.
"""

from abc import ABC, abstractmethod
from typing import Any

from gwendoline.errors import ToolArgumentError


class Tool(ABC):
    """Abstract base class for internal tools.

    Subclasses provide name, description and parameters, and implement
    execute(). The registry calls run(), which validates first.
    """

    # JSON schema type -> Python type(s)
    _TYPE_MAP = {
        "string": str,
        "integer": int,
        "number": (int, float),
        "boolean": bool,
        "array": list,
        "object": dict,
    }

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name used by the model in tool calls."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Description telling the model when to use the tool."""

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """JSON schema of the tool parameters."""

    @abstractmethod
    def execute(self, **kwargs: Any) -> Any:
        """Run the tool with validated arguments."""

    def run(self, arguments: dict[str, Any]) -> Any:
        """Validate the arguments and run the tool.

        Raises:
            ToolArgumentError: If the arguments do not match the schema
        """
        issues = self.validate_params(arguments)
        if issues:
            raise ToolArgumentError(
                f"Invalid arguments for tool '{self.name}'", issues=issues
            )
        return self.execute(**arguments)

    def validate_params(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Validate parameters against the tool's JSON schema.

        Returns:
            List of issues, each with path, message and expected. Empty when
            the parameters are valid.
        """
        schema = self.parameters or {}
        if schema.get("type", "object") != "object":
            raise ValueError(f"Schema must be object type, got {schema.get('type')!r}")
        return self._validate(params, {**schema, "type": "object"}, "")

    def _validate(self, val: Any, schema: dict[str, Any], path: str) -> list[dict[str, Any]]:
        t = schema.get("type")
        label = path or "parameter"
        # bool is an int subclass but never a valid number
        wrong_bool = t in ("integer", "number") and isinstance(val, bool)
        if t in self._TYPE_MAP and (wrong_bool or not isinstance(val, self._TYPE_MAP[t])):
            return [{"path": label, "message": f"Expected {t}, received {type(val).__name__}", "expected": t}]

        issues = []
        if "enum" in schema and val not in schema["enum"]:
            issues.append({"path": label, "message": f"Must be one of {schema['enum']}", "expected": t})
        if t == "object":
            props = schema.get("properties", {})
            for key in schema.get("required", []):
                if key not in val:
                    expected = props.get(key, {}).get("type")
                    issues.append({
                        "path": f"{path}.{key}" if path else key,
                        "message": "Required",
                        "expected": expected,
                    })
            for key, value in val.items():
                if key in props:
                    issues.extend(self._validate(value, props[key], f"{path}.{key}" if path else key))
        if t == "array" and "items" in schema:
            for i, item in enumerate(val):
                issues.extend(self._validate(item, schema["items"], f"{path}[{i}]" if path else f"[{i}]"))
        return issues

    def to_schema(self) -> dict[str, Any]:
        """Convert the tool to the function-calling format sent to Ollama."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
