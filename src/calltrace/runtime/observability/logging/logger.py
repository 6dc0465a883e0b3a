"""Logger consumed by instrumented calls.

Provides the level-gated logging surface the instrumentation wrapper writes to:
- Ordered levels (off < errors < verbose < debug) for cheap gate checks
- Human-readable console output, JSON lines for production
- Loggable conversion of arbitrary values with an optional sanitizer
- Instance naming with a `Nameable` capability hook

Quick Start:
    >>> from calltrace.runtime.observability.logging import configure_logging
    >>>
    >>> # Configure (once at startup)
    >>> logger = configure_logging(format="console", level="verbose")
    >>> logger.log("[1] Repo.fetch", "completed • 4 ms")
"""

from __future__ import annotations

import dataclasses
import sys
import time
import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Protocol, TextIO, runtime_checkable

import orjson
from pydantic import BaseModel

from calltrace.foundation.errors import JsonDict, describe_exception

if TYPE_CHECKING:
    from calltrace.foundation.config import LoggingSettings

Sanitizer = Callable[[str, Any], Any]

_PRIMITIVES = (str, int, float, bool, type(None))


# ─────────────────────────────────────────────────────────────────────────────
# Levels & Capabilities
# ─────────────────────────────────────────────────────────────────────────────


class LogLevel(IntEnum):
    """Configured verbosity. Ordering matters: a level permits everything below it."""
    OFF = 0
    ERRORS = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def parse(cls, value: str | int | LogLevel) -> LogLevel:
        """Accept a level, its int value, or a case-insensitive name."""
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown log level: {value}. Use 'off', 'errors', 'verbose', or 'debug'") from None
        return cls(value)


@runtime_checkable
class Nameable(Protocol):
    """Types that customize how their instances appear in log prefixes.

    Example:
        >>> class Repository:
        ...     def __init__(self, path: str) -> None:
        ...         self.path = path
        ...     def log_name(self, name: str) -> str:
        ...         return f"{name}({self.path})"
    """

    def log_name(self, name: str) -> str: ...


@runtime_checkable
class Loggable(Protocol):
    """Values that provide their own log representation."""

    def to_loggable(self) -> str: ...


# ─────────────────────────────────────────────────────────────────────────────
# Entries & Renderers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class LogEntry:
    """Immutable log entry with all context."""

    timestamp: float
    level: str
    message: str
    context: JsonDict = field(default_factory=dict)

    @property
    def ts_iso(self) -> str:
        """ISO formatted timestamp."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """Human-readable timestamp (HH:MM:SS.mmm)."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable console output. Format: timestamp [level] message"""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None  # None = auto-detect
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.colors is None:
            self.colors = getattr(self.output, "isatty", lambda: False)()

    def render(self, entry: LogEntry) -> None:
        c = _COLORS if self.colors else _NO_COLORS
        parts = ([f"{c['dim']}{entry.ts_human}{c['reset']}"] if self.show_timestamp else [])
        parts += [f"{_LEVEL_COLORS.get(entry.level, c['dim']) if self.colors else ''}[{entry.level}]{c['reset']}",
                  entry.message]
        print(" ".join(parts), file=self.output)
        if "exc_info" in entry.context:
            print(f"{c['red']}{entry.context['exc_info']}{c['reset']}", file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation (Elasticsearch, Loki, Datadog, etc.)."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        print(orjson.dumps({"timestamp": entry.ts_iso, "level": entry.level, "message": entry.message,
                            **entry.context}, default=str, option=orjson.OPT_NON_STR_KEYS).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer for testing."""

    def render(self, entry: LogEntry) -> None:
        pass


def build_renderer(format: str = "console", *, output: TextIO | None = None,  # noqa: A002
                   colors: bool | None = None) -> LogRenderer:
    """Create a renderer by name: "console" (human), "json" (machine), "none"."""
    match format:
        case "console": return ConsoleRenderer(output=output or sys.stderr, colors=colors)
        case "json": return JsonRenderer(output=output or sys.stdout)
        case "none": return NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Logger:
    """Level-gated logger. Messages are joined with their non-empty details by a space.

    Example:
        >>> log = Logger(level=LogLevel.DEBUG)
        >>> log.debug("[2] Repo.fetch", "ref=main")
        # => 10:30:45.120 [debug] [2] Repo.fetch ref=main
    """

    level: LogLevel = LogLevel.OFF
    renderer: LogRenderer = field(default_factory=ConsoleRenderer)

    def __post_init__(self) -> None:
        self.level = LogLevel.parse(self.level)

    @classmethod
    def from_settings(cls, settings: LoggingSettings) -> Logger:
        """Build a logger from `CALLTRACE_LOG_*` settings."""
        return cls(level=LogLevel.parse(settings.level),
                   renderer=build_renderer(settings.format, colors=settings.colors))

    @property
    def is_debugging(self) -> bool:
        return self.level >= LogLevel.DEBUG

    def enabled(self, level: LogLevel) -> bool:
        """Whether output at `level` would be emitted."""
        return level is not LogLevel.OFF and self.level >= level

    def _emit(self, level: str, message: str, details: tuple[object, ...], **context: object) -> None:
        text = " ".join([message, *(str(d) for d in details if d not in (None, ""))])
        self.renderer.render(LogEntry(time.time(), level, text, dict(context)))

    def debug(self, message: str, *details: object) -> None:
        if self.level >= LogLevel.DEBUG:
            self._emit("debug", message, details)

    def log(self, message: str, *details: object) -> None:
        if self.level >= LogLevel.VERBOSE:
            self._emit("info", message, details)

    def error(self, exc: BaseException | None, message: str, *details: object) -> None:
        """Log a failure. The exception is attached as `error` and `exc_info` context."""
        if self.level < LogLevel.ERRORS:
            return
        if exc is None:
            self._emit("error", message, details)
            return
        self._emit("error", message, details, error=describe_exception(exc),
                   exc_info="".join(traceback.format_exception(exc)).rstrip())

    def log_with_debug_params(self, message: str, params: str) -> None:
        """Verbose line whose parameters are only shown while debugging."""
        if self.level < LogLevel.VERBOSE:
            return
        self._emit("info", message, (params,) if self.is_debugging else ())

    # Conversion

    def to_loggable_name(self, instance: object) -> str:
        """Display name for a receiver: its class name, refined by `Nameable.log_name`."""
        if instance is None:
            return ""
        if isinstance(instance, type):
            return instance.__name__
        name = type(instance).__name__
        if isinstance(instance, Nameable):
            try:
                return str(instance.log_name(name))
            except Exception as e:  # noqa: BLE001
                return f"{name} @log.name error: {describe_exception(e)}"
        return name

    def to_loggable(self, value: object, sanitize: Sanitizer | None = None) -> str:
        """Stringify a value for log output. Never raises; failures render as `<error>`."""
        if isinstance(value, _PRIMITIVES):
            return str(value)
        try:
            if isinstance(value, Loggable) and not isinstance(value, type):
                return str(value.to_loggable())
            root = sanitize("", value) if sanitize else value
            return orjson.dumps(_to_plain(root, sanitize, set()), default=str,
                                option=orjson.OPT_NON_STR_KEYS).decode()
        except Exception:  # noqa: BLE001
            return "<error>"


def _to_plain(value: Any, sanitize: Sanitizer | None, active: set[int]) -> Any:
    """Walk a value into JSON-serializable containers, applying `sanitize(key, value)` to every member."""
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}

    marker = id(value)
    if marker in active:
        raise ValueError("circular reference in loggable value")

    def member(key: str, v: Any) -> Any:
        return _to_plain(sanitize(key, v) if sanitize else v, sanitize, active)

    active.add(marker)
    try:
        match value:
            case Mapping():
                return {k: member(str(k), v) for k, v in value.items()}
            case list() | tuple() | set() | frozenset():
                return [member(str(i), v) for i, v in enumerate(value)]
            case _ if hasattr(value, "__dict__") and not callable(value):
                return {k: member(k, v) for k, v in vars(value).items() if not k.startswith("_")}
            case _:
                return value
    finally:
        active.discard(marker)


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


_logger: Logger | None = None


def get_logger() -> Logger:
    """Get the process logger, built from settings on first use."""
    global _logger
    if _logger is None:
        from calltrace.foundation.config import get_settings
        _logger = Logger.from_settings(get_settings().logging)
    return _logger


def set_logger(logger: Logger) -> None:
    """Replace the process logger."""
    global _logger
    _logger = logger


def reset_logger() -> None:
    """Drop the process logger (useful for testing); the next get_logger() rebuilds it."""
    global _logger
    _logger = None


def configure_logging(
    format: str = "console",  # noqa: A002 - shadows builtin but matches stdlib
    level: str | LogLevel = "verbose",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> Logger:
    """Configure the process logger. Format: "console" (human), "json" (machine), "none"."""
    logger = Logger(level=LogLevel.parse(level), renderer=build_renderer(format, output=output, colors=colors))
    set_logger(logger)
    return logger


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


_COLORS = {"reset": "\033[0m", "dim": "\033[2m", "red": "\033[31m", "green": "\033[32m"}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {"debug": _COLORS["dim"], "info": _COLORS["green"], "error": _COLORS["red"]}
