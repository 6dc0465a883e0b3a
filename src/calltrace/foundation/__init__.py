"""Foundation - Building blocks for calltrace.

Contains: error handling, configuration, introspection utilities.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "ErrorCode", "InstrumentationError", "describe_exception",
    # Config
    "CalltraceSettings", "LoggingSettings", "get_settings", "clear_settings_cache",
    # Utils
    "get_parameters", "has_receiver", "is_awaitable", "get_duration_milliseconds",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ErrorCode", "InstrumentationError", "describe_exception"):
        from . import errors
        return getattr(errors, name)
    
    if name in ("CalltraceSettings", "LoggingSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)
    
    if name in ("get_parameters", "has_receiver", "is_awaitable", "get_duration_milliseconds"):
        from . import utils
        return getattr(utils, name)
    
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
