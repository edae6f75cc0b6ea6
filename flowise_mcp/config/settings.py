"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
Settings are read once at process start and frozen afterwards.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    # Flowise connection
    base_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("FLOWISE_BASE_URL", "BASE_URL"),
        description="Flowise server root URL, without the /api/v1 prefix",
    )
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("FLOWISE_API_KEY", "API_KEY"),
        description="Bearer credential for the Flowise API. "
                    "Empty means no Authorization header is sent.",
    )
    timeout: float = Field(
        default=60.0,
        validation_alias=AliasChoices("FLOWISE_TIMEOUT"),
        description="HTTP timeout in seconds for each Flowise request",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )


def load_settings(env_file: str | Path | None = None, **overrides) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional)
        **overrides: Explicit values that take precedence over the environment

    Returns:
        Loaded settings instance
    """
    if env_file:
        return Settings(_env_file=env_file, **overrides)
    return Settings(**overrides)
