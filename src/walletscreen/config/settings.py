"""Application settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from walletscreen.constants.screening import (
    BATCH_SIZE,
    POLL_INTERVAL_SECONDS,
    PROGRESS_EVERY_BATCHES,
)


class Settings(BaseSettings):
    """WalletScreen configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="WalletScreen", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )

    # Telegram
    telegram_bot_token: SecretStr = Field(description="Telegram bot token")
    telegram_api_url: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API base URL"
    )
    telegram_poll_timeout: int = Field(
        default=30, ge=0, le=50, description="Long-poll timeout for getUpdates (seconds)"
    )

    # Batch analysis API
    analysis_api_url: str = Field(
        default="https://api.dedge.pro", description="Batch analysis API base URL"
    )
    analysis_api_key: SecretStr = Field(
        default=SecretStr(""), description="Batch analysis API key (X-API-Key)"
    )
    http_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout for outgoing HTTP requests"
    )

    # Storage
    conditions_file: Path = Field(
        default=Path("conditions.json"), description="JSON file holding user criteria"
    )

    # Screening pipeline
    batch_size: int = Field(
        default=BATCH_SIZE, ge=1, description="Wallet addresses per analysis job"
    )
    poll_interval_seconds: float = Field(
        default=POLL_INTERVAL_SECONDS, gt=0, description="Seconds between job status polls"
    )
    max_poll_attempts: int | None = Field(
        default=None,
        ge=1,
        description="Give up on a job after this many polls (unset = wait indefinitely)",
    )
    progress_every_batches: int = Field(
        default=PROGRESS_EVERY_BATCHES, ge=1, description="Batches between progress messages"
    )
    apply_balance_filter: bool = Field(
        default=False, description="Also require current balance >= configured minimum"
    )

    @field_validator("analysis_api_url", "telegram_api_url")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate API URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API URL must start with http:// or https://")
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]  # Values from env
