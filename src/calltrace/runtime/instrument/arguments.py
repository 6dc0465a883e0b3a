"""Rendering of call arguments into `name=value, ...` text."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from calltrace.foundation.errors import describe_exception

if TYPE_CHECKING:
    from calltrace.runtime.observability.logging import Logger

    from .options import InstrumentationOptions


def format_arguments(
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
    parameters: Sequence[str | None],
    options: InstrumentationOptions,
    logger: Logger,
) -> str:
    """Render arguments in call order, keyword arguments last.

    Positional arguments take their name from `parameters` (bare value past
    its end). Keyword arguments are matched to their declared position so a
    per-position formatter applies however the argument was passed. Empty
    fragments and those a formatter suppressed with False are dropped.

    Example:
        >>> format_arguments((2, 3), {}, ("a", "b"), InstrumentationOptions(), logger)
        'a=2, b=3'
    """
    if options.args is False or not (args or kwargs):
        return ""
    formatters = options.args or {}
    positions = {name: i for i, name in enumerate(parameters) if name}

    items: list[tuple[str | None, int | None, Any]] = [
        (parameters[i] if i < len(parameters) else None, i, v) for i, v in enumerate(args)
    ]
    items += [(k, positions.get(k), v) for k, v in kwargs.items()]

    fragments: list[str] = []
    for name, position, value in items:
        fmt = formatters.get(position) if position is not None else None
        if fmt is None:
            text = logger.to_loggable(value, options.sanitize)
        else:
            try:
                rendered = fmt(value)
            except Exception as e:  # noqa: BLE001
                rendered = f"@log.args error: {describe_exception(e)}"
            if rendered is False:
                continue
            text = str(rendered)
        fragment = f"{name}={text}" if name else text
        if fragment:
            fragments.append(fragment)
    return ", ".join(fragments)
