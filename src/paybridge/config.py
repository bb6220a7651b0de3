"""Application settings using Pydantic for environment-based configuration."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Settings loaded from PAYBRIDGE_* environment variables (or .env)."""

    # Paystack
    paystack_secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="Paystack secret key; also the webhook HMAC key",
    )
    paystack_base_url: str = Field(default="https://api.paystack.co/")
    paystack_timeout_seconds: float = Field(default=15.0, gt=0)

    # App notifications
    notification_timeout_seconds: float = Field(default=10.0, gt=0)
    notification_workers: int = Field(default=4, ge=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True, description="JSON logs; console renderer if false")

    model_config = SettingsConfigDict(
        env_prefix="PAYBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level. Must be one of: {list(VALID_LOG_LEVELS)}")
        return v.upper()

    @field_validator("paystack_base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        # httpx joins relative paths onto base_url; without the slash the last
        # path segment would be replaced.
        return v if v.endswith("/") else f"{v}/"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
