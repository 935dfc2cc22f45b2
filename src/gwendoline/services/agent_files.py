"""Agent file loading.

An agent file is a markdown document whose body becomes the agent prompt. It
may start with YAML front matter between two "---" lines:

    ---
    name: weather-reporter
    model: qwen3:8b
    tools: ['getConditions', 'getTemperature']
    ---
    You report the weather...
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"\A---\r?\n(.*?)\r?\n---\r?\n?(.*)\Z", re.DOTALL)


@dataclass
class AgentDefinition:
    """A parsed agent file.

    Attributes:
        metadata: Front matter values (empty without front matter)
        body: The agent prompt
        source_file: Path the agent was loaded from, if any
    """

    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    source_file: str | None = None

    @property
    def model(self) -> str | None:
        """Model requested by the front matter, if any."""
        model = self.metadata.get("model")
        return str(model) if model else None


def parse_agent_file(content: str) -> AgentDefinition:
    """Split an agent file into front matter and body.

    Content without front matter, or with front matter that is not a YAML
    mapping, is returned whole as the body with empty metadata.
    """
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return AgentDefinition(body=content)

    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring invalid agent front matter: {e}")
        return AgentDefinition(body=content)

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        logger.warning("Ignoring agent front matter that is not a mapping")
        return AgentDefinition(body=content)

    return AgentDefinition(metadata=metadata, body=match.group(2))


def load_agent(path: Path) -> AgentDefinition:
    """Load an agent file if it exists.

    Args:
        path: Path to the agent file

    Returns:
        The parsed agent, or an empty AgentDefinition if the file is missing
        or cannot be read
    """
    if not path.is_file():
        logger.debug(f"No agent file at {path}")
        return AgentDefinition()

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading agent file {path}: {e}")
        return AgentDefinition()

    agent = parse_agent_file(content)
    agent.source_file = str(path)
    logger.info(f"Using agent file {path.name} from {path.parent}")
    logger.debug(f"Agent metadata: {agent.metadata}")
    return agent
