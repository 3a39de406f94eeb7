"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (12-factor app)
  - Fall back to .env file
  - Validate types and constraints at startup

Only the HTTP surface (asgi, main) reads settings. The parsing engine is a
set of pure functions and never consults configuration.

Sub-settings are plain BaseModel classes populated by AppSettings via
env_nested_delimiter="__", so SERVER__PORT maps to server.port and
LIMITS__MAX_PEM_CHARS maps to limits.max_pem_chars.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class ServerSettings(BaseModel):
    """Where uvicorn binds the ASGI application."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")


class LimitSettings(BaseModel):
    """
    Input bounds enforced before any decoding.

    A CSR or a short certificate chain is a few kilobytes of PEM; anything
    far beyond that is refused with VALIDATION_ERROR.
    """

    max_pem_chars: int = Field(
        default=65_536,
        ge=1024,
        description="Maximum accepted length of a PEM text field",
    )


class AppSettings(BaseSettings):
    """
    Root application settings — aggregates all sub-settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=lambda: ServerSettings())
    limits: LimitSettings = Field(default_factory=lambda: LimitSettings())
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module does not know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
