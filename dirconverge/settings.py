"""
Dirconverge Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DirConvergeSettings(BaseSettings):
    """
    Dirconverge configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in the current working directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="DC_",  # All dirconverge env vars must start with DC_
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: DC_LOG_LEVEL)",
    )

    # Convergence Configuration
    dry_run: bool = Field(
        default=False,
        description="Report planned changes without touching the filesystem (env: DC_DRY_RUN)",
    )


# Global settings instance
_settings: DirConvergeSettings | None = None


def get_settings() -> DirConvergeSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        DirConvergeSettings instance
    """
    global _settings
    if _settings is None:
        _settings = DirConvergeSettings()
    return _settings


def reload_settings() -> DirConvergeSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh DirConvergeSettings instance
    """
    global _settings
    _settings = DirConvergeSettings()
    return _settings
