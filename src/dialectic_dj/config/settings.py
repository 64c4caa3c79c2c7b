"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import PlayerConstants, SpotifyConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BusyTimeoutMs, CommandQueueSize, ConnectionTimeoutS


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/ddj.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class SpotifySettings(BaseModel):
    """Spotify application credentials and Web API endpoints."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(
        default="", validation_alias=AliasChoices("client_id", "rspotify_client_id")
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "rspotify_client_secret"),
    )
    api_base_url: str = SpotifyConstants.API_BASE_URL
    accounts_base_url: str = SpotifyConstants.ACCOUNTS_BASE_URL
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)
    refresh_margin_s: float = Field(
        default=PlayerConstants.TOKEN_REFRESH_MARGIN_SECONDS, ge=0.0, le=3600.0
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id) and bool(self.client_secret.get_secret_value())


class PlayerSettings(BaseModel):
    """Playback orchestrator tuning."""

    model_config = SettingsConfigDict(frozen=True)

    wake_lead_seconds: float = Field(default=PlayerConstants.WAKE_LEAD_SECONDS, ge=0.0, le=120.0)
    command_queue_size: CommandQueueSize = PlayerConstants.COMMAND_QUEUE_SIZE
    remote_call_timeout_s: float = Field(
        default=PlayerConstants.REMOTE_CALL_TIMEOUT_SECONDS, gt=0.0, le=300.0
    )
    persist_queue: bool = True
    restore_limit: int = Field(default=500, ge=1, le=10_000)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL, SESSION_ID (top-level)
    - SPOTIFY__CLIENT_ID, SPOTIFY__CLIENT_SECRET, ... (nested with delimiter)
    - PLAYER__WAKE_LEAD_SECONDS, PLAYER__COMMAND_QUEUE_SIZE, ...
    - DATABASE__URL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    session_id: UUID | None = None

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
