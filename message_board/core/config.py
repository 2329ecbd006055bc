"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    return AppSettings()


def _build_database_settings() -> "DatabaseSettings":
    return DatabaseSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class AppSettings(BaseSettings):
    """HTTP server, GraphQL and rate limiting configuration."""

    host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        4000,
        description="Listening port (PORT or APP_PORT)",
        validation_alias=AliasChoices("PORT", "APP_PORT"),
    )
    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    graphql_ide: bool = Field(
        True,
        description="Serve the GraphiQL IDE on GET requests to the GraphQL endpoint",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )

    rate_limit_requests: int = Field(
        10,
        description="Maximum number of messages a user may post per window",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        3600,
        description="Sliding window size in seconds",
        ge=1,
    )
    rate_limit_sweep_interval_seconds: int = Field(
        300,
        description="Interval between sweeps of idle rate limit entries (0 disables)",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        populate_by_name=True,
    )


class DatabaseSettings(BaseSettings):
    """Relational store configuration."""

    url: str = Field(
        "sqlite+aiosqlite:///./message_board.sqlite",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(
        False,
        description="Log every SQL statement (debugging)",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (default logs/app.log)",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting has an invalid value.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    db: DatabaseSettings = Field(default_factory=_build_database_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
