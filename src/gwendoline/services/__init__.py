"""Prompt and agent file services for gwendoline.

This package resolves the system prompt of a run and loads agent files.
"""

from gwendoline.services.agent_files import AgentDefinition, load_agent, parse_agent_file
from gwendoline.services.system_prompts import SystemPromptService

__all__ = [
    "AgentDefinition",
    "SystemPromptService",
    "load_agent",
    "parse_agent_file",
]
