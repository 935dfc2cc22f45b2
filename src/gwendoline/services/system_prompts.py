"""System prompt resolution.

This module provides the SystemPromptService class, which picks the system
prompt for a run: a SYSTEM_PROMPT.md file in the working directory wins,
otherwise one of the built-in prompts is used.
"""

import logging
from pathlib import Path

from gwendoline.services.prompts import (
    DEFAULT_AGENT_SYSTEM_PROMPT,
    DEFAULT_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)


class SystemPromptService:
    """Service for resolving the system prompt of a run."""

    def __init__(self, override_path: Path):
        """Initialize the SystemPromptService.

        Args:
            override_path: Path of the optional SYSTEM_PROMPT.md override
        """
        self.override_path = override_path

    def resolve(self, as_agent: bool = False) -> str:
        """Get the system prompt to inject.

        Args:
            as_agent: Whether an agent prompt is in use, which selects the
                      built-in agent system prompt when there is no override

        Returns:
            The system prompt text
        """
        if self.override_path.is_file():
            try:
                content = self._read_file(self.override_path)
                logger.info(f"Using {self.override_path.name} from {self.override_path.parent}")
                return content
            except ValueError as e:
                logger.error(f"Error reading {self.override_path}: {e}")
                logger.info("Using default system prompt")
                return DEFAULT_SYSTEM_PROMPT

        if as_agent:
            return DEFAULT_AGENT_SYSTEM_PROMPT

        return DEFAULT_SYSTEM_PROMPT

    def _read_file(self, file_path: Path) -> str:
        """Read a file with UTF-8 encoding and error handling.

        Raises:
            ValueError: If file cannot be read or decoded
        """
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"File is not valid UTF-8: {e}")
        except OSError as e:
            raise ValueError(f"Failed to read file: {e}")
