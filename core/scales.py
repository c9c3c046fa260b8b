"""Linear domain <-> pixel mappings for the time and value axes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Tuple

import numpy as np

MIN_TIME_SPAN_S = 1.0
MIN_VALUE_SPAN = 1.0


@dataclass(frozen=True)
class LinearScale:
    """
    Continuous linear interpolation from ``domain`` to ``range``.
    - Values outside the domain extrapolate; nothing is clamped.
    - ``to_domain`` is the exact algebraic inverse of ``to_pixel``.
    """

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __post_init__(self) -> None:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            raise ValueError("scale domain must not be degenerate")
        if r0 == r1:
            raise ValueError("scale range must not be degenerate")

    @property
    def _k(self) -> float:
        (d0, d1), (r0, r1) = self.domain, self.range
        return (r1 - r0) / (d1 - d0)

    def to_pixel(self, x: float | np.ndarray) -> float | np.ndarray:
        d0 = self.domain[0]
        r0 = self.range[0]
        if isinstance(x, np.ndarray):
            return r0 + (x.astype(np.float64) - d0) * self._k
        return r0 + (float(x) - d0) * self._k

    def to_domain(self, px: float | np.ndarray) -> float | np.ndarray:
        d0 = self.domain[0]
        r0 = self.range[0]
        if isinstance(px, np.ndarray):
            return d0 + (px.astype(np.float64) - r0) / self._k
        return d0 + (float(px) - r0) / self._k

    __call__ = to_pixel


@dataclass(frozen=True)
class TimeScale:
    """Linear scale over elapsed POSIX seconds that speaks ``datetime`` at the edges."""

    seconds: LinearScale
    tz: tzinfo = timezone.utc

    @property
    def domain(self) -> Tuple[datetime, datetime]:
        d0, d1 = self.seconds.domain
        return self._from_seconds(d0), self._from_seconds(d1)

    @property
    def range(self) -> Tuple[float, float]:
        return self.seconds.range

    def to_pixel(self, when: datetime | float | np.ndarray) -> float | np.ndarray:
        if isinstance(when, datetime):
            return self.seconds.to_pixel(to_epoch_seconds(when))
        return self.seconds.to_pixel(when)

    def to_domain(self, px: float) -> datetime:
        return self._from_seconds(float(self.seconds.to_domain(px)))

    def to_domain_seconds(self, px: float | np.ndarray) -> float | np.ndarray:
        return self.seconds.to_domain(px)

    def _from_seconds(self, t_s: float) -> datetime:
        return datetime.fromtimestamp(t_s, tz=self.tz)

    __call__ = to_pixel


def to_epoch_seconds(when: datetime) -> float:
    """POSIX seconds for ``when``; a naive datetime is read as UTC."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.timestamp()


def build_time_scale(domain: Tuple[datetime, datetime], range: Tuple[float, float]) -> TimeScale:
    """
    Build the time -> pixel-x scale.
    A single-instant domain is widened to ``MIN_TIME_SPAN_S`` centered on the instant.
    """
    start, end = domain
    t0, t1 = to_epoch_seconds(start), to_epoch_seconds(end)
    if t0 == t1:
        half = MIN_TIME_SPAN_S / 2.0
        t0, t1 = t0 - half, t1 + half
    tz = start.tzinfo or timezone.utc
    return TimeScale(LinearScale((t0, t1), (float(range[0]), float(range[1]))), tz)


def build_value_scale(domain: Tuple[float, float], range: Tuple[float, float]) -> LinearScale:
    """
    Build the value -> pixel-y scale.
    A degenerate domain ``[v, v]`` becomes ``[v, v + MIN_VALUE_SPAN]``.
    """
    v0, v1 = float(domain[0]), float(domain[1])
    if v0 == v1:
        v1 = v0 + MIN_VALUE_SPAN
    return LinearScale((v0, v1), (float(range[0]), float(range[1])))
