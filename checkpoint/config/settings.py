"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Discord bot configuration."""

    name: str = Field(default="Woodlands Checkpoint", description="Bot display name")
    command_prefix: str = Field(default="!", description="Command prefix for bot commands")
    token: str = Field(default="", description="Discord bot token")
    dev_guild_id: int | None = Field(
        default=None,
        description="If set, syncs slash commands to this guild instantly. "
                    "If None, syncs globally (up to 1 hour propagation).",
    )
    status_text: str = Field(
        default="/verify",
        description="Shown as the bot's 'Listening to ...' activity",
    )
    pronoun_max_values: int = Field(
        default=3,
        ge=1,
        le=25,
        description="Maximum number of pronouns a member can pick in one menu",
    )


class DataSettings(BaseSettings):
    """Flat-file storage locations."""

    roster_path: Path = Field(
        default=Path("students.json"),
        description="Roster JSON file (26x26 grid of student records), read at startup",
    )
    guilds_path: Path = Field(
        default=Path("guilds.json"),
        description="Guild configuration JSON file, rewritten on every /initialize",
    )

    model_config = SettingsConfigDict(env_prefix="DATA_")


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: Literal["development", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    # Sub-configurations
    bot: BotSettings = Field(default_factory=BotSettings)
    data: DataSettings = Field(default_factory=DataSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Loaded settings instance
    """
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
