"""Tests for the correlation registry."""

from __future__ import annotations

from calltrace import (
    CorrelationContext,
    CorrelationRegistry,
    get_correlation_context,
    get_correlation_id,
    get_correlation_registry,
    reset_correlation_registry,
    set_correlation_registry,
)
from calltrace.runtime.observability import MAX_SAFE_INTEGER


def test_allocate_is_strictly_increasing() -> None:
    reg = CorrelationRegistry()
    ids = [reg.allocate() for _ in range(5)]
    assert ids == [1, 2, 3, 4, 5]
    assert reg.current_id == 5


def test_allocate_wraps_to_one() -> None:
    reg = CorrelationRegistry(max_id=3)
    assert [reg.allocate() for _ in range(5)] == [1, 2, 3, 1, 2]


def test_default_ceiling_is_max_safe_integer() -> None:
    reg = CorrelationRegistry()
    reg._counter = MAX_SAFE_INTEGER - 1
    assert reg.allocate() == MAX_SAFE_INTEGER
    assert reg.allocate() == 1


def test_open_lookup_close() -> None:
    reg = CorrelationRegistry()
    cid = reg.allocate()
    ctx = CorrelationContext(cid, "[1] Repo.fetch")
    reg.open(cid, ctx)

    assert reg.lookup(cid) is ctx
    assert cid in reg and len(reg) == 1

    reg.close(cid)
    assert reg.lookup(cid) is None
    reg.close(cid)  # idempotent
    assert len(reg) == 0


def test_open_overwrites() -> None:
    reg = CorrelationRegistry()
    reg.open(1, CorrelationContext(1, "a"))
    reg.open(1, replacement := CorrelationContext(1, "b"))
    assert reg.lookup(1) is replacement


def test_current_follows_latest_allocation() -> None:
    """current() returns the latest allocated id's context, not the caller's own."""
    reg = CorrelationRegistry()
    first = reg.allocate()
    reg.open(first, CorrelationContext(first, "first"))
    assert reg.current().prefix == "first"

    reg.allocate()  # a second call starts, e.g. gated off or not correlating
    assert reg.current() is None
    assert reg.lookup(first) is not None


def test_clear_keeps_counter() -> None:
    reg = CorrelationRegistry()
    cid = reg.allocate()
    reg.open(cid, CorrelationContext(cid, "x"))
    reg.clear()
    assert len(reg) == 0
    assert reg.allocate() == 2


def test_process_default_registry() -> None:
    default = get_correlation_registry()
    assert get_correlation_registry() is default

    custom = CorrelationRegistry()
    set_correlation_registry(custom)
    assert get_correlation_registry() is custom

    cid = custom.allocate()
    custom.open(cid, ctx := CorrelationContext(cid, "p"))
    assert get_correlation_id() == cid
    assert get_correlation_context() is ctx

    reset_correlation_registry()
    assert get_correlation_registry() is not custom
    assert len(custom) == 0


def test_empty_registry_is_still_used_as_default() -> None:
    custom = CorrelationRegistry()
    set_correlation_registry(custom)
    assert len(custom) == 0
    assert get_correlation_registry() is custom
