"""Function introspection helpers used at decoration and call time."""

from __future__ import annotations

import inspect
from typing import Callable

_RECEIVER_NAMES = frozenset({"self", "cls"})
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _signature(fn: Callable[..., object]) -> inspect.Signature | None:
    try:
        return inspect.signature(fn)
    except (TypeError, ValueError):  # builtins and some C callables
        return None


def has_receiver(fn: Callable[..., object]) -> bool:
    """Whether the first declared parameter is a `self`/`cls` receiver."""
    if (sig := _signature(fn)) is None:
        return False
    first = next(iter(sig.parameters.values()), None)
    return first is not None and first.kind in _POSITIONAL and first.name in _RECEIVER_NAMES


def get_parameters(fn: Callable[..., object], *, skip_receiver: bool | None = None) -> tuple[str | None, ...]:
    """Ordered positional parameter names of `fn`, excluding the receiver.

    `skip_receiver` says whether the first parameter is a receiver; when None
    it is guessed from the name (see `has_receiver`). A `*args` parameter ends
    the sequence; arguments past the end have no known name and are rendered
    bare.
    
    Example:
        >>> def add(self, a, b=1, *rest, flag=False): ...
        >>> get_parameters(add)
        ('a', 'b')
    """
    if (sig := _signature(fn)) is None:
        return ()
    params = list(sig.parameters.values())
    if skip_receiver is None:
        skip_receiver = has_receiver(fn)
    if skip_receiver and params:
        params = params[1:]
    names: list[str | None] = []
    for p in params:
        if p.kind not in _POSITIONAL:
            break
        names.append(p.name)
    return tuple(names)


def is_awaitable(value: object) -> bool:
    """Whether `value` is pending asynchronous work (coroutine, future, task, ...)."""
    return value is not None and inspect.isawaitable(value)
