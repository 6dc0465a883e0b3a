"""Tests for the level-gated logger, renderers and loggable conversion."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson
import pytest
from pydantic import BaseModel

from calltrace import Logger, LogLevel, configure_logging, get_logger
from calltrace.runtime.observability.logging import ConsoleRenderer, JsonRenderer, LogEntry, NoOpRenderer

if TYPE_CHECKING:
    from conftest import CaptureRenderer


# ─────────────────────────────────────────────────────────────────────────────
# Levels
# ─────────────────────────────────────────────────────────────────────────────


def test_level_ordering() -> None:
    assert LogLevel.OFF < LogLevel.ERRORS < LogLevel.VERBOSE < LogLevel.DEBUG


@pytest.mark.parametrize(("raw", "expected"), [
    ("debug", LogLevel.DEBUG), ("VERBOSE", LogLevel.VERBOSE), (1, LogLevel.ERRORS), (LogLevel.OFF, LogLevel.OFF),
])
def test_level_parse(raw: object, expected: LogLevel) -> None:
    assert LogLevel.parse(raw) is expected  # type: ignore[arg-type]


def test_level_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        LogLevel.parse("chatty")


def test_logger_accepts_level_names(capture: CaptureRenderer) -> None:
    assert Logger(level="verbose", renderer=capture).level is LogLevel.VERBOSE  # type: ignore[arg-type]


def test_verbose_level_gates_debug(capture: CaptureRenderer) -> None:
    log = Logger(level=LogLevel.VERBOSE, renderer=capture)
    log.debug("hidden")
    log.log("shown", "detail")
    log.error(None, "also shown")
    assert capture.lines == ["shown detail", "also shown"]


def test_errors_level_only_logs_errors(capture: CaptureRenderer) -> None:
    log = Logger(level=LogLevel.ERRORS, renderer=capture)
    log.log("hidden")
    log.log_with_debug_params("hidden", "a=1")
    log.error(RuntimeError("boom"), "op", "failed")
    assert capture.lines == ["op failed"]
    entry = capture.entries[0]
    assert entry.level == "error"
    assert entry.context["error"] == "RuntimeError: boom"
    assert "RuntimeError: boom" in entry.context["exc_info"]


def test_off_logs_nothing(capture: CaptureRenderer) -> None:
    log = Logger(level=LogLevel.OFF, renderer=capture)
    log.error(ValueError("x"), "op")
    log.log("op")
    assert capture.entries == []
    assert not log.enabled(LogLevel.OFF)


def test_debug_params_only_shown_when_debugging(capture: CaptureRenderer) -> None:
    Logger(level=LogLevel.VERBOSE, renderer=capture).log_with_debug_params("call", "a=1")
    Logger(level=LogLevel.DEBUG, renderer=capture).log_with_debug_params("call", "a=1")
    assert capture.lines == ["call", "call a=1"]


def test_empty_details_are_skipped(capture: CaptureRenderer) -> None:
    Logger(level=LogLevel.DEBUG, renderer=capture).debug("msg", "", None, "x")
    assert capture.lines == ["msg x"]


# ─────────────────────────────────────────────────────────────────────────────
# Loggable Conversion
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class Credentials:
    user: str
    password: str


class Settings(BaseModel):
    name: str
    retries: int = 3


class Plain:
    def __init__(self) -> None:
        self.path = "/tmp"
        self._private = "hidden"


class Custom:
    def to_loggable(self) -> str:
        return "Custom<1>"


def _redact(key: str, value: object) -> object:
    return "***" if key == "password" else value


@pytest.mark.parametrize(("value", "expected"), [
    ("text", "text"), (5, "5"), (1.5, "1.5"), (True, "True"), (None, "None"),
])
def test_primitives_render_directly(value: object, expected: str) -> None:
    assert Logger().to_loggable(value) == expected


def test_containers_render_as_json() -> None:
    log = Logger()
    assert orjson.loads(log.to_loggable({"a": [1, 2], "b": None})) == {"a": [1, 2], "b": None}
    assert orjson.loads(log.to_loggable((1, "x"))) == [1, "x"]


def test_sanitizer_applies_to_nested_fields() -> None:
    rendered = Logger().to_loggable({"creds": Credentials("ann", "s3cret")}, _redact)
    assert orjson.loads(rendered) == {"creds": {"user": "ann", "password": "***"}}


def test_models_and_objects() -> None:
    log = Logger()
    assert orjson.loads(log.to_loggable(Settings(name="x"))) == {"name": "x", "retries": 3}
    assert orjson.loads(log.to_loggable(Plain())) == {"path": "/tmp"}
    assert log.to_loggable(Custom()) == "Custom<1>"


def test_cycles_degrade_to_error_marker() -> None:
    loop: dict[str, object] = {}
    loop["self"] = loop
    assert Logger().to_loggable(loop) == "<error>"


def test_raising_sanitizer_degrades_to_error_marker() -> None:
    def bad(key: str, value: object) -> object:
        raise KeyError(key)
    assert Logger().to_loggable({"a": 1}, bad) == "<error>"


def test_loggable_name() -> None:
    class Repo:
        def log_name(self, name: str) -> str:
            return f"{name}(main)"

    class Broken:
        def log_name(self, name: str) -> str:
            raise RuntimeError("nope")

    log = Logger()
    assert log.to_loggable_name(None) == ""
    assert log.to_loggable_name(Plain()) == "Plain"
    assert log.to_loggable_name(Plain) == "Plain"
    assert log.to_loggable_name(Repo()) == "Repo(main)"
    assert log.to_loggable_name(Repo) == "Repo"
    assert log.to_loggable_name(Broken()) == "Broken @log.name error: RuntimeError: nope"


# ─────────────────────────────────────────────────────────────────────────────
# Renderers & Configuration
# ─────────────────────────────────────────────────────────────────────────────


def test_console_renderer() -> None:
    out = io.StringIO()
    ConsoleRenderer(output=out, colors=False, show_timestamp=False).render(LogEntry(0.0, "info", "[1] Repo.fetch"))
    assert out.getvalue() == "[info] [1] Repo.fetch\n"


def test_console_renderer_colors() -> None:
    out = io.StringIO()
    renderer = ConsoleRenderer(output=out, colors=True, show_timestamp=False)
    renderer.render(LogEntry(0.0, "info", "op"))
    renderer.render(LogEntry(0.0, "error", "op failed", {"exc_info": "Traceback"}))
    assert out.getvalue().splitlines() == [
        "\033[32m[info]\033[0m op",
        "\033[31m[error]\033[0m op failed",
        "\033[31mTraceback\033[0m",
    ]


def test_json_renderer() -> None:
    out = io.StringIO()
    JsonRenderer(output=out).render(LogEntry(0.0, "error", "op failed", {"error": "ValueError: x"}))
    record = orjson.loads(out.getvalue())
    assert record["level"] == "error"
    assert record["message"] == "op failed"
    assert record["error"] == "ValueError: x"
    assert record["timestamp"].startswith("1970-01-01T00:00:00")


def test_configure_logging_sets_process_logger() -> None:
    out = io.StringIO()
    log = configure_logging(format="json", level="debug", output=out)
    assert get_logger() is log
    log.debug("hello")
    assert orjson.loads(out.getvalue())["message"] == "hello"

    assert isinstance(configure_logging(format="none").renderer, NoOpRenderer)


def test_configure_logging_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")
