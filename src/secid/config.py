"""
Runtime settings for SecID, read from the environment.

Each value comes from, in order of precedence:
1. Environment variables (SECID_ prefix, "__" between section and field)
2. Default values

Examples:
    SECID_SCANNER__MAX_SCAN_LENGTH=250000
    SECID_LOGGING__LEVEL=DEBUG
    SECID_LOGGING__JSON_FORMAT=true
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class ScannerSettings(BaseModel):
    """Free-text scanner limits."""

    # Failed candidates back off one character, so adversarial text costs
    # O(n^2). None disables the cap.
    max_scan_length: int | None = 1_000_000

    @field_validator("max_scan_length")
    @classmethod
    def validate_max_scan_length(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("max_scan_length must be positive (or unset to disable)")
        return v


class LoggingSettings(BaseModel):
    """Level and output style of the ``secid`` log handler."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    json_format: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """All SecID settings; one nested model per section."""

    model_config = SettingsConfigDict(
        env_prefix="SECID_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Settings built once per process, raising ConfigurationError when invalid."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid SecID settings",
            context="loading SECID_* environment variables",
            details={"errors": exc.error_count()},
        ) from exc


def reload_settings() -> Settings:
    """Re-read the environment and replace the cached settings."""
    get_settings.cache_clear()
    return get_settings()
