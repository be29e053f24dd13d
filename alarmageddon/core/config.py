"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Alarmageddon"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str = Field(
        default="",
        validation_alias=AliasChoices("log_file", "amgn_logfile"),
        description="Append logs to this file instead of stdout",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )

    # Discord
    discord_app_id: str = Field(
        default="",
        validation_alias=AliasChoices("discord_app_id", "app_id"),
        description="Discord application ID",
    )
    discord_token: str = Field(default="", description="Discord bot token")
    discord_public_key: str = Field(
        default="",
        validation_alias=AliasChoices("discord_public_key", "public_key"),
        description="Hex encoded Ed25519 key used to verify interactions",
    )
    discord_api_base: str = Field(
        default="https://discord.com/api/v10",
        description="Discord REST API base URL",
    )
    discord_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Outbound Discord request timeout in seconds",
    )

    # Channels
    default_channel_id: str = Field(default="", description="Channel receiving routed alerts")
    db_channel_id: str = Field(default="", description="Channel receiving database alerts")

    # Webhook authentication
    webhook_token: str = Field(default="", description="Bearer token for the Authorization header")
    webhook_url_token: str = Field(default="", description="Token accepted in the ?token= query parameter")

    # Retention
    retention_days: int = Field(default=30, ge=1, description="Days to keep alerts and routing decisions")
    retention_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="Interval between retention sweeps",
    )
    silence_check_interval_seconds: int = Field(
        default=60,
        ge=1,
        description="Interval between silence expiry checks",
    )

    # Windows
    recent_window: int = Field(
        default=100,
        ge=1,
        description="Number of recent alerts scanned by pattern acknowledgment",
    )
    routing_history_limit: int = Field(
        default=100,
        ge=1,
        description="Number of routing decisions considered for history and stats",
    )
    alert_list_limit: int = Field(
        default=10,
        ge=1,
        le=25,
        description="Number of alerts shown by /alert list",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
