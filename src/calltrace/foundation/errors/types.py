"""Shared type aliases for values that flow into log output."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
