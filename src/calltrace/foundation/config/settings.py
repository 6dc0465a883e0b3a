"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from calltrace.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.logging.level
    'off'
    
    # Or with environment variables:
    # CALLTRACE_LOG_LEVEL=debug
    # CALLTRACE_LOG_FORMAT=json
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration for instrumented calls."""
    
    model_config = SettingsConfigDict(
        env_prefix="CALLTRACE_LOG_",
        extra="ignore",
    )
    
    level: Literal["off", "errors", "verbose", "debug"] = "off"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force ANSI colors (None = auto-detect)")
    
    @field_validator("level", "format", mode="before")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


class CalltraceSettings(BaseSettings):
    """Root settings for calltrace.
    
    Loads configuration from environment variables with CALLTRACE_ prefix.
    
    Example environment variables:
        CALLTRACE_LOG_LEVEL=verbose
        CALLTRACE_LOG_FORMAT=json
        CALLTRACE_LOG_COLORS=false
    """
    
    model_config = SettingsConfigDict(
        env_prefix="CALLTRACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )
    
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    @computed_field
    @property
    def is_enabled(self) -> bool:
        """Whether any instrumentation output can be produced."""
        return self.logging.level != "off" and self.logging.format != "none"


@lru_cache(maxsize=1)
def get_settings() -> CalltraceSettings:
    """Get the global settings instance (cached)."""
    return CalltraceSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).
    
    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
