"""Correlation registry linking entry and exit lines of instrumented calls.

Every instrumented call draws an id from a single monotonic counter. Calls
that correlate open a `CorrelationContext` under that id for their whole
lifetime, including the asynchronous tail, so code running inside the call
can annotate the eventual exit line through `exit_details`.

Example:
    >>> registry = CorrelationRegistry()
    >>> cid = registry.allocate()
    >>> registry.open(cid, CorrelationContext(cid, "[1] Repo.fetch"))
    >>> registry.current().exit_details = " (cached)"
    >>> registry.close(cid)
"""

from __future__ import annotations

from dataclasses import dataclass

# Largest integer an IEEE double represents exactly; ids wrap to 1 past it
MAX_SAFE_INTEGER = 2**53 - 1


@dataclass(slots=True)
class CorrelationContext:
    """Mutable record for one open call. `exit_details` is appended verbatim to its exit line."""

    id: int
    prefix: str
    exit_details: str | None = None


class CorrelationRegistry:
    """Maps correlation ids to the contexts of open calls and owns the id counter.

    Not thread-safe: calls are expected to run on one thread, interleaved
    only at await points.
    """

    __slots__ = ("_contexts", "_counter", "_max_id")

    def __init__(self, *, max_id: int = MAX_SAFE_INTEGER) -> None:
        self._contexts: dict[int, CorrelationContext] = {}
        self._counter = 0
        self._max_id = max_id

    def allocate(self) -> int:
        """Next id; wraps to 1 after `max_id`."""
        if self._counter >= self._max_id:
            self._counter = 0
        self._counter += 1
        return self._counter

    @property
    def current_id(self) -> int:
        """Most recently allocated id (0 before the first allocation)."""
        return self._counter

    def open(self, cid: int, context: CorrelationContext) -> None:
        self._contexts[cid] = context

    def close(self, cid: int) -> None:
        self._contexts.pop(cid, None)

    def lookup(self, cid: int) -> CorrelationContext | None:
        return self._contexts.get(cid)

    def current(self) -> CorrelationContext | None:
        """Context of the most recently allocated id, if that call correlates and is still open.

        Best effort: with interleaved async calls this may belong to a
        different call than the caller's own. Prefer `lookup` with a known id.
        """
        return self._contexts.get(self._counter)

    def clear(self) -> None:
        """Drop all open contexts (counter is kept)."""
        self._contexts.clear()

    def __len__(self) -> int:
        return len(self._contexts)

    def __contains__(self, cid: object) -> bool:
        return cid in self._contexts

    def __repr__(self) -> str:
        return f"CorrelationRegistry(open={len(self._contexts)}, current_id={self._counter})"


# ─────────────────────────────────────────────────────────────────────────────
# Process Default
# ─────────────────────────────────────────────────────────────────────────────


_registry: CorrelationRegistry | None = None


def get_correlation_registry() -> CorrelationRegistry:
    """Get the process-wide correlation registry."""
    global _registry
    return _registry if _registry is not None else (_registry := CorrelationRegistry())


def set_correlation_registry(registry: CorrelationRegistry) -> None:
    """Replace the process-wide registry."""
    global _registry
    _registry = registry


def reset_correlation_registry() -> None:
    """Reset the process-wide registry (useful for testing)."""
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None


def get_correlation_context() -> CorrelationContext | None:
    """Best-effort context of the latest call (see `CorrelationRegistry.current`)."""
    return get_correlation_registry().current()


def get_correlation_id() -> int:
    """Most recently allocated correlation id."""
    return get_correlation_registry().current_id
