"""gwendoline: command-line agent for Ollama models with tools.

This package answers a prompt (or continues a conversation) with an Ollama
model, letting the model call internal tools and tools of MCP servers.
"""

from gwendoline.app import RunOptions, run

__version__ = "0.1.0"

__all__ = ["RunOptions", "run", "__version__"]
