"""Configuration management using pydantic-settings."""

from .settings import CalltraceSettings, LoggingSettings, clear_settings_cache, get_settings

__all__ = [
    "CalltraceSettings",
    "LoggingSettings",
    "clear_settings_cache",
    "get_settings",
]
