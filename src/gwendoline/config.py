"""Configuration module for gwendoline using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class GwendolineSettings(BaseSettings):
    """Main configuration settings for gwendoline.

    All settings can be overridden via environment variables with the
    GWENDOLINE_ prefix. For example, GWENDOLINE_OLLAMA_HOST will override the
    ollama_host setting. Command-line flags override both.
    """

    # Ollama
    ollama_host: str = "http://localhost:11434"
    ollama_api_key: str | None = None
    user_agent: str = "Gwendoline/0.0"

    # Models
    local_model: str = "qwen3:4b"
    cloud_model: str = "gpt-oss:120b-cloud"

    # Files (relative to working_dir)
    working_dir: str = "."
    system_prompt_file: str = "SYSTEM_PROMPT.md"
    agent_file: str = "AGENT.md"
    mcp_config_file: str = "mcp.json"

    # Conversation loop
    max_tool_iterations: int = 25

    # Deadlines in seconds
    backend_timeout: float = 300.0
    tool_call_timeout: float = 60.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="GWENDOLINE_")

    # --- Resolved paths (computed from working_dir + relative names) ---

    @property
    def resolved_system_prompt_path(self) -> Path:
        """Get the full path to the system prompt override file."""
        return Path(self.working_dir) / self.system_prompt_file

    @property
    def resolved_agent_path(self) -> Path:
        """Get the full path to the default agent file."""
        return Path(self.working_dir) / self.agent_file

    @property
    def resolved_mcp_config_path(self) -> Path:
        """Get the full path to the MCP server configuration file."""
        return Path(self.working_dir) / self.mcp_config_file

    def resolve_model(self, cloud: bool = False) -> str:
        """Pick the default model for local or cloud execution."""
        return self.cloud_model if cloud else self.local_model
