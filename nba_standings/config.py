"""Configuration management using Pydantic Settings.

This module provides centralized configuration for the standings board,
supporting environment variables and .env file loading.

Example:
    >>> from nba_standings.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.data_dir)
    'data'
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Environment variables take precedence over .env file values.

    Attributes:
        api_host: Host serving the standings and team-stats feeds.
        api_path: Path prefix prepended to every dataset path.
        api_token: Bearer token sent with every request.
        user_agent: User-Agent header sent with every request.
        api_timeout: Remote fetch timeout in seconds.
        data_dir: Directory holding the cached dataset snapshots.
        standings_max_cache_hours: Max age of the standings snapshot.
        team_stats_max_cache_hours: Max age of the team-stats snapshot.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote API
    api_host: str = Field(
        default="erikberg.com",
        alias="NBA_API_HOST",
        description="Host serving the NBA feeds",
    )
    api_path: str = Field(
        default="/",
        alias="NBA_API_PATH",
        description="Path prefix for dataset requests",
    )
    api_token: str = Field(
        default="",
        alias="NBA_API_TOKEN",
        description="Bearer token for the NBA feeds",
    )
    user_agent: str = Field(
        default="nba-standings/0.1.0",
        alias="NBA_USER_AGENT",
        description="User-Agent header for remote requests",
    )
    api_timeout: float = Field(
        default=30.0,
        alias="NBA_API_TIMEOUT",
        gt=0.0,
        description="Remote fetch timeout in seconds",
    )

    # Cache
    data_dir: str = Field(
        default="data",
        alias="NBA_DATA_DIR",
        description="Directory holding cached dataset snapshots",
    )
    standings_max_cache_hours: float = Field(
        default=1.0,
        alias="STANDINGS_MAX_CACHE_HOURS",
        gt=0.0,
        description="Hours before the standings snapshot is refreshed",
    )
    team_stats_max_cache_hours: float = Field(
        default=1.0,
        alias="TEAM_STATS_MAX_CACHE_HOURS",
        gt=0.0,
        description="Hours before the team-stats snapshot is refreshed",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    log_dir: str = Field(
        default="logs",
        alias="LOG_DIR",
        description="Directory for log files",
    )

    @field_validator("data_dir", "log_dir")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure path strings are valid."""
        if not v or v.isspace():
            raise ValueError("Path cannot be empty or whitespace")
        return v

    @field_validator("api_path")
    @classmethod
    def validate_api_path(cls, v: str) -> str:
        """Normalize the path prefix to start and end with a slash."""
        v = v.strip() or "/"
        if not v.startswith("/"):
            v = "/" + v
        if not v.endswith("/"):
            v = v + "/"
        return v

    @property
    def data_dir_obj(self) -> Path:
        """Return cache directory as Path object."""
        return Path(self.data_dir)

    @property
    def log_dir_obj(self) -> Path:
        """Return log directory as Path object."""
        return Path(self.log_dir)

    @property
    def api_base_url(self) -> str:
        """Return the base URL that dataset paths are appended to."""
        return f"https://{self.api_host}{self.api_path}"

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir_obj.mkdir(parents=True, exist_ok=True)
        self.log_dir_obj.mkdir(parents=True, exist_ok=True)


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> print(settings.api_timeout)
        30.0
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
