"""Shared tick formatter for time-based axes."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from math import isfinite
from typing import Iterable

from core.formatting import CLOCK_FORMAT


class TimeTickFormatter:
    """Format POSIX seconds as wall-clock labels in a fixed timezone."""

    __slots__ = ("_tz", "_fmt")

    def __init__(self, *, tz: tzinfo | None = None, fmt: str = CLOCK_FORMAT) -> None:
        self._tz = tz or timezone.utc
        self._fmt = fmt

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def format_ticks(self, values: Iterable[float]) -> list[str]:
        return [self._format_single(v) for v in values]

    def _format_single(self, value: float) -> str:
        if value is None:
            return ""
        try:
            numeric = float(value)
        except (TypeError, ValueError):
            return ""
        if not isfinite(numeric):
            return ""
        try:
            return datetime.fromtimestamp(numeric, tz=self._tz).strftime(self._fmt)
        except (OverflowError, OSError, ValueError):
            return ""

    def __call__(self, values):
        return self.format_ticks(values)
