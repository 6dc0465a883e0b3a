"""calltrace - Method instrumentation with correlated, timed entry/exit logging.

Decorate methods, functions or properties to log every call: an entry line
with the arguments, and an exit line with the outcome and elapsed time. Both
lines carry a correlation id, so interleaved asynchronous calls can be told
apart in the log.

Quick Start:
    >>> from calltrace import configure_logging, log
    >>>
    >>> configure_logging(format="console", level="debug")
    >>>
    >>> class Calculator:
    ...     @log()
    ...     def add(self, a: int, b: int) -> int:
    ...         return a + b
    >>>
    >>> Calculator().add(2, 3)
    # => [info] [1] Calculator.add a=2, b=3
    # => [info] [1] Calculator.add completed • 0 ms
    5

Annotating the exit line from inside the call:
    >>> from calltrace import get_correlation_context
    >>>
    >>> class Cache:
    ...     @log()
    ...     def get(self, key: str) -> str | None:
    ...         hit = key in self._data
    ...         if ctx := get_correlation_context():
    ...             ctx.exit_details = " (hit)" if hit else " (miss)"
    ...         return self._data.get(key)

Customizing how instances are named:
    >>> class Repository:
    ...     def log_name(self, name: str) -> str:  # Nameable
    ...         return f"{name}({self.path})"

Configuration (environment):
    CALLTRACE_LOG_LEVEL=off|errors|verbose|debug
    CALLTRACE_LOG_FORMAT=console|json|none
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import ErrorCode, InstrumentationError

# Config
from .foundation.config import CalltraceSettings, LoggingSettings, clear_settings_cache, get_settings

# Observability
from .runtime.observability import (
    CorrelationContext,
    CorrelationRegistry,
    Loggable,
    Logger,
    LogLevel,
    Nameable,
    configure_logging,
    get_correlation_context,
    get_correlation_id,
    get_correlation_registry,
    get_logger,
    reset_correlation_registry,
    reset_logger,
    set_correlation_registry,
    set_logger,
)

# Instrumentation
from .runtime.instrument import InstrumentationOptions, LogContext, debug, log

__all__ = [
    "__version__",
    # Instrumentation
    "log", "debug", "InstrumentationOptions", "LogContext",
    # Observability
    "Logger", "LogLevel", "Loggable", "Nameable", "configure_logging", "get_logger", "set_logger", "reset_logger",
    "CorrelationContext", "CorrelationRegistry", "get_correlation_registry", "set_correlation_registry",
    "reset_correlation_registry", "get_correlation_context", "get_correlation_id",
    # Errors
    "ErrorCode", "InstrumentationError",
    # Config
    "CalltraceSettings", "LoggingSettings", "get_settings", "clear_settings_cache",
]
