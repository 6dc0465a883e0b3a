"""Method instrumentation: entry/exit logging, timing and call correlation.

- log / debug: Decorator factories for methods, functions and properties
- InstrumentationOptions: Validated per-decoration options
- LogContext: Record passed to custom `prefix` callbacks
- format_arguments: `name=value` rendering of call arguments
"""

from .arguments import format_arguments
from .decorator import debug, log
from .options import InstrumentationOptions, LogContext
from .timing import elapsed_suffix, start_timer

__all__ = [
    "InstrumentationOptions",
    "LogContext",
    "debug",
    "elapsed_suffix",
    "format_arguments",
    "log",
    "start_timer",
]
