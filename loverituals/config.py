# loverituals/config.py
"""
Centralized application configuration using pydantic-settings.

All settings are read from environment variables or .env file.
Share-link tuning (identifier length, save attempts) lives here too,
so it can be changed per deployment without code changes.
"""

import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Priority: environment variables > .env file > defaults
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )

    # --- Database ---
    DB_URL: str = Field(
        default="postgresql://localhost:5432/loverituals",
        description="PostgreSQL connection URL"
    )

    # --- Redis ---
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (tool catalog cache)"
    )
    CACHE_TTL_SECONDS: int = Field(
        default=60,
        ge=1,
        description="TTL for cached tool catalog responses"
    )

    # --- Server ---
    HOST: str = Field(
        default="127.0.0.1",
        description="Server bind host"
    )
    PORT: int = Field(
        default=8888,
        description="Server bind port"
    )

    # --- Debug / Logging ---
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # --- Observability ---
    SERVICE_NAME: str = Field(
        default="loverituals-api",
        description="service.name reported to OpenTelemetry"
    )
    OTEL_ENABLED: bool = Field(
        default=False,
        description="Export traces to the console span exporter"
    )

    # --- Share links ---
    SHARE_ID_LENGTH: int = Field(
        default=12,
        ge=6,
        le=64,
        description="Length of public share identifiers"
    )
    RECORD_ID_LENGTH: int = Field(
        default=24,
        ge=8,
        le=64,
        description="Length of the random part of internal config record ids"
    )
    SHARE_SAVE_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Insert attempts before a save gives up on share id collisions"
    )

    # --- Request guards ---
    RATE_LIMIT_API: int = Field(
        default=60,
        description="Requests per minute per client on /api/ paths"
    )
    RATE_LIMIT_GENERAL: int = Field(
        default=200,
        description="Requests per minute per client on other paths"
    )
    AUTH_USER_HEADER: str = Field(
        default="X-User-Id",
        description="Header carrying the user id resolved by the upstream auth layer"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v_upper


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance (singleton pattern)."""
    return Settings()


# --- Paths (computed, not from env) ---
PROJECT_ROOT: str = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LOGS_PATH: str = os.path.join(PROJECT_ROOT, "logs")
