"""Runtime - Call instrumentation and observability.

Contains: instrument (decorators), observability (logger, correlation registry).
"""

from __future__ import annotations

__all__ = [
    # Instrumentation
    "log", "debug", "InstrumentationOptions", "LogContext",
    # Observability
    "Logger", "LogLevel", "Nameable", "Loggable", "configure_logging", "get_logger",
    "CorrelationContext", "CorrelationRegistry", "get_correlation_registry",
    "get_correlation_context", "get_correlation_id",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("log", "debug", "InstrumentationOptions", "LogContext"):
        from . import instrument
        return getattr(instrument, name)
    
    observability_attrs = {
        "Logger", "LogLevel", "Nameable", "Loggable", "configure_logging", "get_logger",
        "CorrelationContext", "CorrelationRegistry", "get_correlation_registry",
        "get_correlation_context", "get_correlation_id",
    }
    if name in observability_attrs:
        from . import observability
        return getattr(observability, name)
    
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
