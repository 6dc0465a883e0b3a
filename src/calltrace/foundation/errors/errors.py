"""Errors raised by the instrumentation layer itself.

Only configuration misuse is raised: decorating something that cannot be
wrapped, or passing options that fail validation. Failures of instrumented
methods are never wrapped; they propagate to the caller as-is.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Self


class ErrorCode(StrEnum):
    """Machine-readable reason for a decoration-time failure."""
    UNSUPPORTED_TARGET = "UNSUPPORTED_TARGET"
    INVALID_OPTIONS = "INVALID_OPTIONS"


class InstrumentationError(TypeError):
    """Raised at decoration time when a target or its options are unusable.
    
    Attributes:
        code: Why decoration failed
        target: Display name of the decorated object (may be empty)
    """

    __slots__ = ("code", "target")

    def __init__(self, message: str, code: ErrorCode, target: str = "") -> None:
        self.code, self.target = code, target
        super().__init__(f"{target}: {message}" if target else message)

    @classmethod
    def unsupported(cls, target: object) -> Self:
        """Target is neither a callable nor a property getter."""
        kind = type(target).__name__
        return cls(f"cannot instrument object of type {kind!r}; expected a method, function or property",
                   ErrorCode.UNSUPPORTED_TARGET, getattr(target, "__qualname__", ""))

    @classmethod
    def invalid_options(cls, detail: str, target: str = "") -> Self:
        """Options failed validation."""
        return cls(f"invalid instrumentation options: {detail}", ErrorCode.INVALID_OPTIONS, target)


def describe_exception(exc: BaseException) -> str:
    """Render an exception as `Type: message` for inline diagnostics."""
    msg = str(exc)
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__
