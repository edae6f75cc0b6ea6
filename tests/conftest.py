"""Shared pytest fixtures."""

import pytest

_CONFIG_ENV_VARS = (
    "FLOWISE_BASE_URL",
    "FLOWISE_API_KEY",
    "FLOWISE_TIMEOUT",
    "BASE_URL",
    "API_KEY",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    """Keep the developer's shell configuration out of the tests."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
