"""Shared fixtures: a capturing renderer and isolated process-wide state."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from calltrace import (
    CorrelationRegistry,
    Logger,
    LogLevel,
    clear_settings_cache,
    reset_correlation_registry,
    reset_logger,
    set_correlation_registry,
    set_logger,
)
from calltrace.runtime.observability.logging import LogEntry


@dataclass
class CaptureRenderer:
    """Renderer that records entries instead of printing them."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    @property
    def lines(self) -> list[str]:
        return [e.message for e in self.entries]

    def at(self, level: str) -> list[LogEntry]:
        return [e for e in self.entries if e.level == level]


@pytest.fixture(autouse=True)
def clean_state() -> object:
    """Reset the process logger, registry and settings around each test."""
    reset_logger()
    reset_correlation_registry()
    clear_settings_cache()
    yield
    reset_logger()
    reset_correlation_registry()
    clear_settings_cache()


@pytest.fixture
def capture() -> CaptureRenderer:
    return CaptureRenderer()


@pytest.fixture
def logger(capture: CaptureRenderer) -> Logger:
    """Process logger at debug level writing to `capture`."""
    log = Logger(level=LogLevel.DEBUG, renderer=capture)
    set_logger(log)
    return log


@pytest.fixture
def registry() -> CorrelationRegistry:
    """Fresh process-wide correlation registry."""
    reg = CorrelationRegistry()
    set_correlation_registry(reg)
    return reg
