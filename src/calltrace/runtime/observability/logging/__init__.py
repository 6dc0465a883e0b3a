"""Logging module: level-gated logger, renderers and loggable conversion."""

from .logger import (
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogLevel,
    LogRenderer,
    Loggable,
    Logger,
    Nameable,
    NoOpRenderer,
    Sanitizer,
    build_renderer,
    configure_logging,
    get_logger,
    reset_logger,
    set_logger,
)

__all__ = [
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEntry",
    "LogLevel",
    "LogRenderer",
    "Loggable",
    "Logger",
    "Nameable",
    "NoOpRenderer",
    "Sanitizer",
    "build_renderer",
    "configure_logging",
    "get_logger",
    "reset_logger",
    "set_logger",
]
