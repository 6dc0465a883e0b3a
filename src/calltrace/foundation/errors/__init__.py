"""Error handling for calltrace.

- ErrorCode: Reasons a decoration can be rejected
- InstrumentationError: Raised at decoration time on misuse
- describe_exception: Inline rendering of exceptions in log lines
"""

from .errors import ErrorCode, InstrumentationError, describe_exception
from .types import JsonDict

__all__ = [
    "ErrorCode", "InstrumentationError", "describe_exception",
    "JsonDict",
]
