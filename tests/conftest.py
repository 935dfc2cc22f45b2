"""Pytest configuration and shared fixtures for gwendoline tests.

This module provides common fixtures used across all test modules.
"""

import pytest

from gwendoline.config import GwendolineSettings


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with an isolated working directory.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        GwendolineSettings: Settings instance configured for testing.
    """
    return GwendolineSettings(
        ollama_host="http://localhost:11434",
        working_dir=str(tmp_path),
        local_model="qwen3:4b",
        cloud_model="gpt-oss:120b-cloud",
        max_tool_iterations=5,
        backend_timeout=5.0,
        tool_call_timeout=5.0,
        log_level="DEBUG",
    )
