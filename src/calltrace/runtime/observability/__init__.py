"""Observability: the logger instrumented calls write to and the correlation registry.

- Logger/LogLevel: Level-gated logging with console and JSON renderers
- CorrelationRegistry: Integer ids linking entry and exit lines of a call
"""

from .correlation import (
    MAX_SAFE_INTEGER,
    CorrelationContext,
    CorrelationRegistry,
    get_correlation_context,
    get_correlation_id,
    get_correlation_registry,
    reset_correlation_registry,
    set_correlation_registry,
)
from .logging import (
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogLevel,
    LogRenderer,
    Loggable,
    Logger,
    Nameable,
    NoOpRenderer,
    build_renderer,
    configure_logging,
    get_logger,
    reset_logger,
    set_logger,
)

__all__ = [
    # Correlation
    "MAX_SAFE_INTEGER", "CorrelationContext", "CorrelationRegistry",
    "get_correlation_context", "get_correlation_id", "get_correlation_registry",
    "reset_correlation_registry", "set_correlation_registry",
    # Logging
    "ConsoleRenderer", "JsonRenderer", "LogEntry", "LogLevel", "LogRenderer", "Loggable", "Logger",
    "Nameable", "NoOpRenderer", "build_renderer", "configure_logging", "get_logger",
    "reset_logger", "set_logger",
]
