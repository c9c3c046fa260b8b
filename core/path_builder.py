"""Turn an ordered sample sequence into polyline vertices in pixel space."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from core.dataset import Sample, epoch_array
from core.scales import LinearScale, TimeScale

__all__ = ["PathGeometry", "build_path", "MISSING_VALUE_FILL"]

# Missing provider measurements are drawn on the zero baseline rather than as gaps.
MISSING_VALUE_FILL = 0.0


@dataclass(frozen=True)
class PathGeometry:
    """Ordered polyline vertices; backends decide how to draw them."""

    xs: np.ndarray
    ys: np.ndarray

    def __len__(self) -> int:
        return int(self.xs.size)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for x, y in zip(self.xs.tolist(), self.ys.tolist()):
            yield x, y

    def to_svg_path(self, precision: int = 3) -> str:
        """Return an SVG ``d`` attribute, e.g. ``"M40,470L80,250"``."""
        if not len(self):
            return ""
        parts = [f"{x:.{precision}f},{y:.{precision}f}" for x, y in self]
        return "M" + "L".join(parts)

    def closed_area(self, baseline_y: float) -> "PathGeometry":
        """Polygon enclosing the region between the line and ``baseline_y``."""
        if not len(self):
            return self
        xs = np.concatenate(([self.xs[0]], self.xs, [self.xs[-1]]))
        ys = np.concatenate(([baseline_y], self.ys, [baseline_y]))
        return PathGeometry(xs, ys)


def build_path(
    samples: Sequence[Sample], time_scale: TimeScale, value_scale: LinearScale
) -> PathGeometry:
    """
    Emit one vertex per sample, in input order.

    ``None`` values are replaced with ``MISSING_VALUE_FILL`` before scaling, so a
    missing measurement shows up as a vertex on the zero baseline, never a gap.
    """
    n = len(samples)
    t = epoch_array(samples)
    v = np.fromiter(
        (MISSING_VALUE_FILL if s.value is None else s.value for s in samples),
        dtype=np.float64,
        count=n,
    )
    xs = time_scale.to_pixel(t)
    ys = value_scale.to_pixel(v)
    return PathGeometry(np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64))
