"""Pytest configuration and shared fixtures.

This module provides common fixtures for all tests.
"""

import pytest

# Variables read by load_config(); cleared so a developer's shell cannot leak into tests
_CONFIG_ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "CLAUDE_API_KEY",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "OPENAI_ORGANIZATION",
    "LLM_MAX_TOKENS",
    "LLM_TEMPERATURE",
    "LLM_MAX_RETRIES",
    "LLM_BACKOFF_BASE",
    "LLM_MAX_RESPONSE_SIZE_MB",
    "JOB_MAX_ATTEMPTS",
    "JOB_RETRY_DELAY_SEC",
    "JOB_INTER_DELAY_SEC",
    "JOB_DEFAULT_PRIORITY",
    "LOG_LEVEL",
    "LOG_JSON",
    "REQUEST_TIMEOUT_SEC",
    "LOG_TRUNCATE_LENGTH",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch, tmp_path):
    """Run every test without provider credentials or a stray .env file."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
