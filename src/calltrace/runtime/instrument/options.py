"""Per-decoration options and the context record handed to `prefix` callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class InstrumentationOptions(BaseModel):
    """Options fixed at decoration time.

    Attributes:
        debug: Log through the debug channel; only active at the debug level
        args: False hides all arguments; a mapping of position -> formatter
            overrides rendering per argument (a formatter returning False hides it)
        condition: Predicate over the call arguments; False skips instrumentation
        correlate: Assign and print a correlation id even when untimed
        enter: Extra text appended to the entry line
        exit: Text for the exit line in place of "completed"
        prefix: Replaces the computed prefix; receives `LogContext` and the arguments
        sanitize: `(key, value) -> value` transform applied during default argument rendering
        single_line: Merge entry and exit into one line
        timed: Append elapsed milliseconds to the exit line (implies correlate)
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    debug: bool = False
    args: Literal[False] | dict[int, Callable[[Any], Any]] | None = None
    condition: Callable[..., bool] | None = None
    correlate: bool = False
    enter: Callable[..., str] | None = None
    exit: Callable[[Any], str] | None = None
    prefix: Callable[..., str] | None = None
    sanitize: Callable[[str, Any], Any] | None = None
    single_line: bool = False
    timed: bool = Field(default=True, description="Measure elapsed time; timed calls always correlate")

    @property
    def correlates(self) -> bool:
        return self.correlate or self.timed

    @property
    def logs_exit(self) -> bool:
        """Whether an exit (or failure) line is produced at all."""
        return self.timed or self.exit is not None


@dataclass(frozen=True, slots=True)
class LogContext(Generic[T]):
    """Read-only view of a call, passed to a `prefix` callback."""

    id: int
    instance: T | None
    instance_name: str
    name: str
    prefix: str
