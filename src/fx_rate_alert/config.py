"""
Configuration management for the FX rate alert service.

This module reads environment variables (and an optional ``.env`` file) into
an immutable Settings object using Pydantic Settings for type safety and
validation.
"""

import math
from typing import Any

import httpx
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_CHECK_INTERVAL_MINUTES = 15


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Exchange-rate service
    api_key: str = Field(..., description="Exchange-rate API key")
    rate_api_url: str = Field(
        default="https://v6.exchangerate-api.com/v6",
        description="Exchange-rate API base URL",
    )

    # Telegram
    telegram_token: str = Field(..., description="Telegram bot token")
    telegram_chat_id: str = Field(..., description="Telegram chat to notify")
    telegram_api_url: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API base URL"
    )

    # Alert rule
    notification_threshold: float = Field(
        ..., description="Notify when the rate is strictly above this value"
    )
    base_currency: str = Field(default="GBP", description="Currency being priced")
    target_currency: str = Field(default="EUR", description="Currency it is priced in")

    # Scheduling
    check_interval_minutes: int = Field(
        default=DEFAULT_CHECK_INTERVAL_MINUTES,
        description="Minutes between two rate checks",
    )
    http_timeout_seconds: float = Field(
        default=10.0, description="Timeout applied to every outbound HTTP call"
    )

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Log format")

    @field_validator("api_key", "telegram_token", "telegram_chat_id")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject blank credentials and identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("notification_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Only finite thresholds can be compared meaningfully."""
        if not math.isfinite(v):
            raise ValueError(f"must be a finite number, got {v}")
        return v

    @field_validator("base_currency", "target_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Normalize currency codes to upper case."""
        v = v.strip().upper()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("check_interval_minutes", mode="before")
    @classmethod
    def parse_check_interval(cls, v: Any) -> int:
        """Parse the interval, falling back to the default on bad input."""
        try:
            minutes = int(str(v).strip())
        except (TypeError, ValueError):
            return DEFAULT_CHECK_INTERVAL_MINUTES
        if minutes <= 0:
            return DEFAULT_CHECK_INTERVAL_MINUTES
        return minutes

    @field_validator("http_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate HTTP timeout."""
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"must be a positive number, got {v}")
        return v

    @field_validator("api_key", "telegram_token")
    @classmethod
    def validate_url_safe(cls, v: str) -> str:
        """Credentials are embedded in request paths."""
        if any(ch.isspace() or not ch.isprintable() for ch in v):
            raise ValueError("must not contain whitespace or control characters")
        return v

    @field_validator("rate_api_url", "telegram_api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate a service base URL."""
        v = v.strip().rstrip("/")
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid URL: {e}") from e
        if url.scheme not in {"http", "https"} or not url.host:
            raise ValueError(f"Invalid URL: {v} (expected an http(s) URL)")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed_formats = {"json", "console"}
        if v.lower() not in allowed_formats:
            raise ValueError(f"Invalid log format: {v}")
        return v.lower()

    @property
    def check_interval_seconds(self) -> float:
        """Get the polling interval in seconds."""
        return self.check_interval_minutes * 60.0

    @property
    def currency_pair(self) -> str:
        """Get the watched pair as ``BASE/TARGET``."""
        return f"{self.base_currency}/{self.target_currency}"


def load_settings(env_file: str | None = ".env") -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional dotenv file read in addition to the environment

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as e:
        error = e.errors()[0]
        variable = str(error["loc"][0]).upper() if error["loc"] else "UNKNOWN"
        if error["type"] == "missing":
            message = f"{variable} environment variable is required"
        else:
            message = f"Invalid value for {variable}: {error['msg']}"
        raise ConfigurationError(
            message, variable=variable, context={"error_count": e.error_count()}
        ) from e
