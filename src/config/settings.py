# src/config/settings.py — v2
"""Typed configuration loaded from the environment and .env via pydantic-settings.

Every field can be set through a ``MEMOCACHE_``-prefixed environment
variable, e.g. ``MEMOCACHE_CONCURRENCY=single_owner``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from memocache.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Library settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_prefix="MEMOCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    concurrency: Literal["single_owner", "locking"] = "locking"
    default_cache_name: str = "default"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("default_cache_name")
    @classmethod
    def validate_cache_name(cls, v: str) -> str:  # noqa: N805
        if not v.strip():
            raise ValueError("default_cache_name must not be blank")
        return v.strip()

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        try:
            parse_size(self.log_rotation)
        except ValueError:
            errors.append(f"LOG_ROTATION {self.log_rotation!r} is not a valid size")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment and .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
