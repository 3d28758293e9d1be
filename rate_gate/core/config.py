"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_store_settings() -> "StoreSettings":
    """Build counter store settings from environment."""

    return StoreSettings()


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    Pydantic Settings (v2) populates values from environment variables, so
    the nested containers are created via default_factory rather than passed
    explicitly.
    """

    return AppSettings()


class StoreSettings(BaseSettings):
    """Shared counter store configuration."""

    backend: Literal["redis", "memory"] = Field(
        "redis",
        description="Counter store backend. 'memory' is per-process only (dev/tests).",
    )
    redis_url: str = Field(
        "redis://localhost:6379/0",
        description="Redis connection URL (may embed credentials)",
    )
    socket_timeout_seconds: float = Field(
        5.0,
        description="Socket timeout for each Redis call",
        gt=0,
    )
    key_prefix: str = Field(
        "rate_limit",
        description="Prefix for window keys; must match across instances sharing a store",
        min_length=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field(
        "json",
        description="Log line format",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where log lines are written",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (default logs/app.log)",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read/propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable the per-client fixed-window rate limit",
    )
    rate_limit_requests: int = Field(
        10,
        description="Maximum number of requests allowed per window (per client)",
        ge=1,
    )
    rate_limit_window_length: float = Field(
        0.2,
        description="Window length, expressed in rate_limit_window_unit",
        gt=0,
    )
    rate_limit_window_unit: Literal["minute", "hour"] = Field(
        "minute",
        description="Unit of rate_limit_window_length",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers",
    )
    trust_forwarded_for: bool = Field(
        True,
        description="Identify clients by the first X-Forwarded-For entry when present",
    )

    admin_key_required: bool = Field(
        True,
        description="Whether the admin endpoints require an X-Admin-Key header",
    )
    admin_api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid admin keys",
    )

    people_data_path: str | None = Field(
        None,
        description="Path to the JSON file served by the person lookup endpoint",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    store: StoreSettings = Field(default_factory=_build_store_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
