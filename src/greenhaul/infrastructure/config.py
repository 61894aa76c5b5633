"""Application settings loaded from environment variables.

Uses pydantic-settings for type-safe configuration. Every variable is
prefixed with ``GREENHAUL_`` (e.g. ``GREENHAUL_DATABASE_URL``) and may
also come from a ``.env`` file in the working directory.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with defaults for local development."""

    model_config = SettingsConfigDict(
        env_prefix="GREENHAUL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///greenhaul.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30  # seconds waiting for a pooled connection
    db_echo: bool = False

    # Scheduling
    daily_slot_cap: int = 3

    # Payment gateway
    payment_gateway_url: str = "http://localhost:8080"
    payment_timeout_seconds: float = 10.0
    payment_api_key: str = ""

    # Email notifications (disabled while smtp_host is empty)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_from: str = "no-reply@greenhaul.mx"
    smtp_use_tls: bool = True
    notify_to: str = ""  # operations copy of every confirmation
    notification_workers: int = 2

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
