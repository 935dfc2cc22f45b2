"""Internal tools available in every run."""

import random
from datetime import datetime, timezone
from typing import Any

from gwendoline.tools.base import Tool

KNOWN_CITIES = ("London", "Paris", "New York", "Tokyo", "Sydney")
CONDITIONS = ("sunny", "cloudy", "rainy", "snowy")

_CITY_PARAMETERS = {
    "type": "object",
    "properties": {
        "city": {
            "type": "string",
            "description": f"Name of the city, one of: {', '.join(KNOWN_CITIES)}",
        },
    },
    "required": ["city"],
}


class GetConditionsTool(Tool):
    """Report the current weather conditions of a city."""

    @property
    def name(self) -> str:
        return "getConditions"

    @property
    def description(self) -> str:
        return "Get the current weather conditions (sunny, cloudy, rainy or snowy) for a city."

    @property
    def parameters(self) -> dict[str, Any]:
        return _CITY_PARAMETERS

    def execute(self, city: str, **kwargs: Any) -> str:
        if city not in KNOWN_CITIES:
            return f"Unknown city {city}"
        return random.choice(CONDITIONS)


class GetTemperatureTool(Tool):
    """Report the current temperature of a city."""

    @property
    def name(self) -> str:
        return "getTemperature"

    @property
    def description(self) -> str:
        return "Get the current temperature in degrees Celsius for a city."

    @property
    def parameters(self) -> dict[str, Any]:
        return _CITY_PARAMETERS

    def execute(self, city: str, **kwargs: Any) -> str:
        if city not in KNOWN_CITIES:
            return f"Unknown city {city}"
        return f"{random.randint(0, 35)} degrees Celsius"


class UtcTimeTool(Tool):
    """Report the current UTC time."""

    @property
    def name(self) -> str:
        return "internalUtcTime"

    @property
    def description(self) -> str:
        return (
            "Returns the actual current UTC time. Only use this if the user explicitly "
            "asks for the current real-world time/date or uses relative temporal "
            "expressions like 'now', 'today', or 'currently'. Never use for general "
            "knowledge. The assistant must never output meta commentary about tool "
            "usage or tool availability. Returns a JSON object with 'time' and 'timestamp'."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    def execute(self, **kwargs: Any) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        return {
            "time": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "timestamp": int(now.timestamp() * 1000),
        }


def default_tools() -> list[Tool]:
    """Create the internal tools in registration order."""
    return [GetConditionsTool(), GetTemperatureTool(), UtcTimeTool()]
