"""Tick placement for the value and time axes."""
from __future__ import annotations

import math
from datetime import datetime, tzinfo

import numpy as np

__all__ = ["tick_step", "linear_ticks", "time_tick_interval", "time_ticks", "TIME_INTERVALS_S"]

_E10 = math.sqrt(50.0)
_E5 = math.sqrt(10.0)
_E2 = math.sqrt(2.0)

# Clock-friendly spacings, in seconds.
TIME_INTERVALS_S: tuple[float, ...] = (
    1.0,
    5.0,
    15.0,
    30.0,
    60.0,
    5 * 60.0,
    15 * 60.0,
    30 * 60.0,
    3600.0,
    3 * 3600.0,
    6 * 3600.0,
    12 * 3600.0,
    86400.0,
    2 * 86400.0,
    7 * 86400.0,
)


def tick_step(start: float, stop: float, count: int) -> tuple[float, int]:
    """Return ``(factor, power)`` so that the tick step is ``factor * 10**power``.

    ``factor`` is one of 1, 2, 5 or 10, picked so that roughly ``count`` ticks
    cover ``[start, stop]``.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    step = abs(stop - start) / count
    if step == 0 or not math.isfinite(step):
        return 0.0, 0
    power = math.floor(math.log10(step))
    error = step / (10.0 ** power)
    if error >= _E10:
        factor = 10.0
    elif error >= _E5:
        factor = 5.0
    elif error >= _E2:
        factor = 2.0
    else:
        factor = 1.0
    return factor, power


def linear_ticks(start: float, stop: float, count: int) -> np.ndarray:
    """Evenly spaced "nice" ticks within ``[start, stop]`` (inclusive)."""
    if start > stop:
        return linear_ticks(stop, start, count)[::-1]
    factor, power = tick_step(start, stop, count)
    if factor == 0:
        return np.array([start], dtype=np.float64) if math.isfinite(start) else np.zeros(0)
    if power >= 0:
        step = factor * 10.0 ** power
        i0 = math.ceil(start / step)
        i1 = math.floor(stop / step)
        return np.arange(i0, i1 + 1, dtype=np.float64) * step
    # Divide by the inverse step to avoid 0.30000000000000004-style labels.
    inv = 10.0 ** (-power) / factor
    i0 = math.ceil(start * inv)
    i1 = math.floor(stop * inv)
    return np.arange(i0, i1 + 1, dtype=np.float64) / inv


def time_tick_interval(span_s: float, count: int) -> float:
    if count <= 0:
        raise ValueError("count must be positive")
    target = abs(span_s) / count
    for interval in TIME_INTERVALS_S:
        if interval >= target:
            return interval
    return TIME_INTERVALS_S[-1]


def time_ticks(start_s: float, stop_s: float, count: int, *, tz: tzinfo | None = None) -> np.ndarray:
    """
    POSIX-second ticks aligned to the wall clock of ``tz``.
    A tick every 3 hours lands on 00:00, 03:00, ... in that zone, not in UTC.
    """
    if stop_s < start_s:
        start_s, stop_s = stop_s, start_s
    interval = time_tick_interval(stop_s - start_s, count)
    offset = 0.0
    if tz is not None:
        delta = tz.utcoffset(datetime.fromtimestamp(start_s, tz=tz))
        offset = delta.total_seconds() if delta is not None else 0.0
    i0 = math.ceil((start_s + offset) / interval)
    i1 = math.floor((stop_s + offset) / interval)
    return np.arange(i0, i1 + 1, dtype=np.float64) * interval - offset
