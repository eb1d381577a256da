"""
Configuration management using pydantic-settings.

Loads configuration from OPTS_-prefixed environment variables and .env files.
Validates fields and provides typed access to settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opts.types import DEFAULT_GROUP


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        OPTS_DB_PATH: SQLite database holding the settings groups
        OPTS_DEFAULT_GROUP: Group used when a call names none
        OPTS_INVALIDATE_ON_UPDATE: Drop cached entries for a group after updating it
        OPTS_LOG_LEVEL: Logging level
        OPTS_LOG_FILE: JSON Lines log file
    """

    model_config = SettingsConfigDict(
        env_prefix="OPTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DB_PATH: Path = Field(
        default=Path(".cache/options.db"),
        description="SQLite database holding the settings groups",
    )

    DEFAULT_GROUP: str = Field(
        default=DEFAULT_GROUP,
        description="Settings group used when none is given",
    )

    INVALIDATE_ON_UPDATE: bool = Field(
        default=True,
        description="Invalidate the request cache for a group after it is updated",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON Lines log file")

    @field_validator("DEFAULT_GROUP")
    @classmethod
    def validate_default_group(cls, v: str) -> str:
        """Validate that the default group name is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("DEFAULT_GROUP must not be blank")
        return v

    def ensure_directories(self) -> None:
        """Create the database directory if it doesn't exist."""
        self.DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    def display(self) -> dict[str, str | bool | None]:
        """Return settings for display."""
        return {
            "DB_PATH": str(self.DB_PATH),
            "DEFAULT_GROUP": self.DEFAULT_GROUP,
            "INVALIDATE_ON_UPDATE": self.INVALIDATE_ON_UPDATE,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
