"""Introspection and formatting helpers."""

from .functions import get_parameters, has_receiver, is_awaitable
from .strings import get_duration_milliseconds

__all__ = ["get_duration_milliseconds", "get_parameters", "has_receiver", "is_awaitable"]
