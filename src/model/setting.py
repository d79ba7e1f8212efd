"""
Global settings management using Pydantic.

This module provides a singleton Settings class that loads configuration
from environment variables and .env files.
"""
import os
from pathlib import Path
from typing import Literal, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> str | None:
    """
    Find the .env file by searching the usual locations.

    Search order:
    1. Path specified by ACTORFSM_ENV_FILE environment variable
    2. Current working directory (.env)
    3. Project root directory (where setup.py/pyproject.toml exists) (.env)

    Returns:
        str | None: Path to .env file if found, None otherwise
    """
    custom_path = os.getenv('ACTORFSM_ENV_FILE')
    if custom_path and Path(custom_path).exists():
        return custom_path

    cwd = Path.cwd()
    env_file = cwd / '.env'
    if env_file.exists():
        return str(env_file)

    current = cwd
    for _ in range(5):  # Search up to 5 levels
        if (current / 'setup.py').exists() or (current / 'pyproject.toml').exists():
            env_file = current / '.env'
            if env_file.exists():
                return str(env_file)
            break
        if current.parent == current:
            break
        current = current.parent

    return None


def _load_env_file(env_file_path: str) -> None:
    """
    Manually load a .env file by reading and setting environment variables.

    Variables already present in the environment win over the file.

    Args:
        env_file_path: Path to the .env file to load
    """
    with open(env_file_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            if '=' in line:
                key, value = line.split('=', 1)
                key = key.strip()
                value = value.strip()

                if value.startswith('"') and value.endswith('"'):
                    value = value[1:-1]
                elif value.startswith("'") and value.endswith("'"):
                    value = value[1:-1]

                if key and key not in os.environ:
                    os.environ[key] = value


class Settings(BaseSettings):
    """Global runtime settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACTORFSM_",
        env_file=None,  # We'll handle .env file loading manually
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
        frozen=False,
    )

    def __init__(self, **kwargs: Any):
        """Initialize Settings with automatic .env file loading."""
        env_file_path = _find_env_file()
        if env_file_path:
            _load_env_file(env_file_path)

        super().__init__(**kwargs)

    # Logging configuration
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )

    log_file: str | None = Field(
        default=None,
        description="Log file path, file logging is disabled when unset"
    )

    log_rotation: str = Field(
        default="10 MB",
        description="Rotation condition for the log file sink"
    )

    # Demo actor
    demo_tick: float = Field(
        default=0.5,
        gt=0,
        le=60,
        description="Seconds between two steps of a demo behavior"
    )


# Global singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global singleton Settings instance.

    Creates the instance on first call, subsequent calls return the same instance.

    Returns:
        Settings: The global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings from environment variables.

    This is useful for testing or when environment variables change at runtime.

    Returns:
        Settings: The new settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
