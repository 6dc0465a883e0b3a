"""Method instrumentation decorators.

Wraps methods, functions and property getters so every call emits an entry
line and a timed exit (or failure) line, correlated by an integer id that
survives asynchronous suspension. The wrapper is transparent: callers see the
same return value, the same exception object and the same awaitable
settlement as with the undecorated method.

Example:
    >>> class Repository:
    ...     @log()
    ...     def fetch(self, ref: str, depth: int = 1) -> list[str]:
    ...         return [ref]
    ...
    ...     @debug(args={0: lambda url: url.split("@")[-1]})
    ...     async def push(self, url: str) -> None: ...
    ...
    ...     @property
    ...     @log(timed=False)
    ...     def head(self) -> str:
    ...         return "main"
    >>> Repository().fetch("main")
    # => [info] [1] Repository.fetch
    # => [info] [1] Repository.fetch completed • 0 ms
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping, Sequence
from functools import wraps
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from calltrace.foundation.errors import InstrumentationError, describe_exception
from calltrace.foundation.utils import get_parameters, has_receiver, is_awaitable
from calltrace.runtime.observability.correlation import (
    CorrelationContext,
    CorrelationRegistry,
    get_correlation_registry,
)
from calltrace.runtime.observability.logging import Logger, LogLevel, get_logger

from .arguments import format_arguments
from .options import InstrumentationOptions, LogContext
from .timing import elapsed_suffix, start_timer

F = TypeVar("F")
T = TypeVar("T")

# Faults inside instrumentation itself (a renderer raising, ...) go here, never to the caller
fault_log = logging.getLogger("calltrace.instrument")


# ─────────────────────────────────────────────────────────────────────────────
# Public Decorators
# ─────────────────────────────────────────────────────────────────────────────


def log(*, logger: Logger | None = None, registry: CorrelationRegistry | None = None,
        **options: Any) -> Callable[[F], F]:
    """Instrument a method, function, staticmethod, classmethod or property.

    Options are validated immediately (see `InstrumentationOptions`); invalid
    options or an unsupported target raise `InstrumentationError` at
    decoration time. `logger` and `registry` default to the process-wide
    instances, resolved on every call.

    A sync target returning an `asyncio.Future` gets that same future back.
    Any other awaitable is handed back wrapped in a coroutine that logs on
    settlement, so the caller loses the original object's type and
    attributes. A wrapped awaitable that is never awaited never logs its exit
    and leaves its correlation context open.
    """
    try:
        opts = InstrumentationOptions(**options)
    except ValidationError as e:
        raise InstrumentationError.invalid_options(str(e)) from e

    def decorator(target: F) -> F:
        match target:
            case property():
                if target.fget is None:
                    raise InstrumentationError.unsupported(target)
                return target.getter(_instrument(target.fget, opts, logger, registry, receiver=True))  # type: ignore[return-value]
            case staticmethod():
                return staticmethod(_instrument(target.__func__, opts, logger, registry, receiver=False))  # type: ignore[return-value]
            case classmethod():
                return classmethod(_instrument(target.__func__, opts, logger, registry, receiver=True))  # type: ignore[return-value]
            case type():
                raise InstrumentationError.unsupported(target)
            case _ if callable(target):
                return _instrument(target, opts, logger, registry, receiver=has_receiver(target))  # type: ignore[return-value]
            case _:
                raise InstrumentationError.unsupported(target)

    return decorator


def debug(*, logger: Logger | None = None, registry: CorrelationRegistry | None = None,
          **options: Any) -> Callable[[F], F]:
    """`log` routed to the debug channel; only active when the level is debug."""
    return log(logger=logger, registry=registry, **{"debug": True, **options})


# ─────────────────────────────────────────────────────────────────────────────
# Wrapping
# ─────────────────────────────────────────────────────────────────────────────


def _instrument(
    fn: Callable[..., Any],
    opts: InstrumentationOptions,
    logger: Logger | None,
    registry: CorrelationRegistry | None,
    *,
    receiver: bool,
) -> Callable[..., Any]:
    parameters = get_parameters(fn, skip_receiver=receiver)
    name = getattr(fn, "__name__", type(fn).__name__)

    def begin(args: tuple[Any, ...], kwargs: dict[str, Any]) -> _Invocation | None:
        reg = registry if registry is not None else get_correlation_registry()
        cid = reg.allocate()
        log_ = logger if logger is not None else get_logger()
        call_args = args[1:] if receiver else args
        if not _should_log(log_, opts, call_args, kwargs):
            return None
        try:
            return _Invocation.begin(log_, reg, opts, cid, args[0] if receiver and args else None,
                                     name, call_args, kwargs, parameters)
        except Exception:  # noqa: BLE001
            fault_log.exception("instrumentation of %s failed before the call", name)
            reg.close(cid)
            return None

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if (call := begin(args, kwargs)) is None:
            return fn(*args, **kwargs)
        call.start()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            call.failed(e)
            raise
        if is_awaitable(result):
            return call.defer(result)
        call.completed(result)
        return result

    @wraps(fn)
    async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
        if (call := begin(args, kwargs)) is None:
            return await fn(*args, **kwargs)
        call.start()
        try:
            result = await fn(*args, **kwargs)
        except BaseException as e:
            call.failed(e)
            raise
        call.completed(result)
        return result

    return async_wrapper if inspect.iscoroutinefunction(fn) else wrapper


def _should_log(logger: Logger, opts: InstrumentationOptions, args: Sequence[Any], kwargs: Mapping[str, Any]) -> bool:
    if not logger.enabled(LogLevel.DEBUG if opts.debug else LogLevel.VERBOSE):
        return False
    if opts.condition is None:
        return True
    try:
        return bool(opts.condition(*args, **kwargs))
    except Exception:  # noqa: BLE001
        fault_log.exception("log condition raised; call not instrumented")
        return False


def _callback_text(label: str, callback: Callable[..., Any] | None, *args: Any, **kwargs: Any) -> str:
    """Run an `enter`/`exit` callback, rendering a raised exception inline."""
    if callback is None:
        return ""
    try:
        return str(callback(*args, **kwargs))
    except Exception as e:  # noqa: BLE001
        return f"@log.{label} error: {describe_exception(e)}"


# ─────────────────────────────────────────────────────────────────────────────
# Per-call State
# ─────────────────────────────────────────────────────────────────────────────


class _Invocation:
    """One gated call: holds its prefix, argument text, correlation context and timer."""

    __slots__ = ("logger", "registry", "opts", "cid", "prefix", "enter", "params", "context", "marker")

    def __init__(self, logger: Logger, registry: CorrelationRegistry, opts: InstrumentationOptions,
                 cid: int, prefix: str, enter: str, params: str, context: CorrelationContext | None) -> None:
        self.logger, self.registry, self.opts, self.cid = logger, registry, opts, cid
        self.prefix, self.enter, self.params, self.context = prefix, enter, params, context
        self.marker: int | None = None

    @classmethod
    def begin(cls, logger: Logger, registry: CorrelationRegistry, opts: InstrumentationOptions, cid: int,
              instance: object, name: str, args: tuple[Any, ...], kwargs: dict[str, Any],
              parameters: Sequence[str | None]) -> _Invocation:
        """Build the prefix, open the correlation context and emit the entry line."""
        instance_name = logger.to_loggable_name(instance)
        prefix = f"{f'[{cid:x}] ' if opts.correlates else ''}{f'{instance_name}.' if instance_name else ''}{name}"
        if opts.prefix is not None:
            ctx = LogContext(cid, instance, instance_name, name, prefix)
            try:
                prefix = str(opts.prefix(ctx, *args, **kwargs))
            except Exception as e:  # noqa: BLE001
                prefix = f"{prefix} @log.prefix error: {describe_exception(e)}"

        context = None
        if opts.correlates:
            context = CorrelationContext(cid, prefix)
            registry.open(cid, context)

        call = cls(logger, registry, opts, cid, prefix, _callback_text("enter", opts.enter, *args, **kwargs),
                   format_arguments(args, kwargs, parameters, opts, logger), context)
        if not opts.single_line:
            call._emit(call._enter_line)
        return call

    def start(self) -> None:
        self.marker = start_timer(self.opts.timed)

    # Outcomes

    def completed(self, result: object) -> None:
        try:
            if self.opts.logs_exit:
                self._emit(self._exit_line, result)
        finally:
            self._close()

    def failed(self, exc: BaseException) -> None:
        try:
            if self.opts.logs_exit:
                self._emit(self._failure_line, exc)
        finally:
            self._close()

    def defer(self, awaitable: Awaitable[T]) -> Awaitable[T]:
        """Log once `awaitable` settles. Futures are returned as-is; other awaitables are wrapped."""
        if asyncio.isfuture(awaitable):
            awaitable.add_done_callback(self._settled)
            return awaitable
        return self._settle(awaitable)

    def _settled(self, future: asyncio.Future[Any]) -> None:
        if future.cancelled():
            self.failed(asyncio.CancelledError())
        elif (exc := future.exception()) is not None:
            self.failed(exc)
        else:
            self.completed(future.result())

    async def _settle(self, awaitable: Awaitable[T]) -> T:
        try:
            result = await awaitable
        except BaseException as e:
            self.failed(e)
            raise
        self.completed(result)
        return result

    # Lines

    @property
    def _details(self) -> str:
        ctx = self.context
        return f"{ctx.exit_details}" if ctx is not None and ctx.exit_details else ""

    def _enter_line(self) -> None:
        head = f"{self.prefix}{self.enter}"
        if not self.params:
            (self.logger.debug if self.opts.debug else self.logger.log)(head)
        elif self.opts.debug:
            self.logger.debug(head, self.params)
        else:
            self.logger.log_with_debug_params(head, self.params)

    def _exit_line(self, result: object) -> None:
        timing = elapsed_suffix(self.marker)
        text = _callback_text("exit", self.opts.exit, result) if self.opts.exit is not None else "completed"
        if not self.opts.single_line:
            (self.logger.debug if self.opts.debug else self.logger.log)(
                f"{self.prefix} {text}{self._details}{timing}")
        elif self.opts.debug:
            self.logger.debug(f"{self.prefix}{self.enter} {text}{self._details}{timing}", self.params)
        else:
            self.logger.log_with_debug_params(f"{self.prefix}{self.enter} {text}{self._details}{timing}", self.params)

    def _failure_line(self, exc: BaseException) -> None:
        outcome = f"failed{self._details}{elapsed_suffix(self.marker)}"
        if self.opts.single_line:
            self.logger.error(exc, f"{self.prefix}{self.enter}", outcome, self.params)
        else:
            self.logger.error(exc, self.prefix, outcome)

    def _emit(self, line: Callable[..., None], *args: Any) -> None:
        try:
            line(*args)
        except Exception:  # noqa: BLE001
            fault_log.exception("failed to log %s", self.prefix)

    def _close(self) -> None:
        if self.context is not None:
            self.registry.close(self.cid)
