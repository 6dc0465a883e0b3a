"""Monotonic timing for exit lines."""

from __future__ import annotations

import time

from calltrace.foundation.utils import get_duration_milliseconds


def start_timer(enabled: bool) -> int | None:
    """Capture a `perf_counter_ns` origin, or None when timing is off."""
    return time.perf_counter_ns() if enabled else None


def elapsed_suffix(marker: int | None) -> str:
    """` • N ms` since `marker`, or "" when nothing was captured."""
    return f" • {get_duration_milliseconds(marker)} ms" if marker is not None else ""
