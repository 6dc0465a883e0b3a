"""String helpers for log output."""

from __future__ import annotations

import time


def get_duration_milliseconds(start_ns: int) -> str:
    """Whole milliseconds elapsed since a `time.perf_counter_ns()` marker."""
    return str((time.perf_counter_ns() - start_ns) // 1_000_000)
