"""Pytest configuration for integration tests.

These tests run whole runs through gwendoline.app and the CLI with the
Ollama client replaced by a mock, so no Ollama server is needed.
"""

from unittest.mock import AsyncMock, patch

import pytest

from tests.helpers import chat_response


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    The patch is applied where the run builds its client, so every run in a
    test talks to the same mock instance.
    """
    with patch("gwendoline.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.chat.return_value = chat_response("Hello from the model.")
        mock_client_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def working_dir(tmp_path, monkeypatch):
    """Point the settings at an empty working directory."""
    monkeypatch.setenv("GWENDOLINE_WORKING_DIR", str(tmp_path))
    for name in ("GWENDOLINE_LOCAL_MODEL", "GWENDOLINE_CLOUD_MODEL", "GWENDOLINE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
