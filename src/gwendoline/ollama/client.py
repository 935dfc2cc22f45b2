"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is created once per run and
reused for every turn of the conversation loop.
"""

import logging
from typing import Any, AsyncIterator

import ollama

logger = logging.getLogger(__name__)


def _to_dict(response: Any) -> dict[str, Any]:
    """Convert an ollama response object to a plain dict."""
    if hasattr(response, "model_dump"):
        return response.model_dump()
    if isinstance(response, dict):
        return response
    return vars(response)


class OllamaClient:
    """Async client for Ollama chat completions.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(
        self,
        host: str,
        user_agent: str = "Gwendoline/0.0",
        api_key: str | None = None,
    ) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
            user_agent: Value of the User-Agent header
            api_key: Optional bearer token (needed for ollama.com)
        """
        self.host = host
        headers = {"User-Agent": user_agent}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = ollama.AsyncClient(host=host, headers=headers)
        logger.debug(f"OllamaClient initialized with host: {host}")

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        think: bool = False,
    ) -> dict[str, Any]:
        """Request a single, complete chat response.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format
            tools: Tool definitions in function-calling format
            think: Whether to request separate reasoning output

        Returns:
            dict: The response, with "message" holding content, thinking and
                  tool_calls

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(f"Starting chat with model {model}, {len(messages)} messages")
        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=False,
                think=think,
            )
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise
        return _to_dict(response)

    async def chat_stream(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        think: bool = False,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream chat responses from Ollama.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format
            tools: Tool definitions in function-calling format
            think: Whether to request separate reasoning output

        Yields:
            dict: Response chunks from Ollama. Each chunk contains a
                  "message" dict that may carry content, thinking or
                  tool_calls, and "done" on the final chunk.

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(f"Starting chat stream with model {model}, {len(messages)} messages")
        try:
            async for chunk in await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=True,
                think=think,
            ):
                yield _to_dict(chunk)
        except Exception as e:
            logger.error(f"Chat stream failed: {e}")
            raise

        logger.debug("Chat stream completed")
