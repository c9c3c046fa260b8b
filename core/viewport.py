"""Fixed pixel geometry of one chart instance."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    width: float = 928.0
    height: float = 500.0
    margin_top: float = 20.0
    margin_right: float = 30.0
    margin_bottom: float = 30.0
    margin_left: float = 40.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport width and height must be positive")
        if min(self.margin_top, self.margin_right, self.margin_bottom, self.margin_left) < 0:
            raise ValueError("margins must be non-negative")
        if self.margin_left + self.margin_right >= self.width:
            raise ValueError("horizontal margins leave no plot area")
        if self.margin_top + self.margin_bottom >= self.height:
            raise ValueError("vertical margins leave no plot area")

    @property
    def plot_left(self) -> float:
        return self.margin_left

    @property
    def plot_right(self) -> float:
        return self.width - self.margin_right

    @property
    def plot_top(self) -> float:
        return self.margin_top

    @property
    def plot_bottom(self) -> float:
        return self.height - self.margin_bottom

    @property
    def plot_width(self) -> float:
        return self.plot_right - self.plot_left

    @property
    def plot_height(self) -> float:
        return self.plot_bottom - self.plot_top

    @property
    def plot_rect(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) of the area inside the margins."""
        return self.plot_left, self.plot_top, self.plot_right, self.plot_bottom

    def contains(self, x: float, y: float | None = None) -> bool:
        """True when the point lies inside the plot area. ``y=None`` checks x only."""
        if not (self.plot_left <= x <= self.plot_right):
            return False
        if y is None:
            return True
        return self.plot_top <= y <= self.plot_bottom

    def time_range(self) -> tuple[float, float]:
        return self.plot_left, self.plot_right

    def value_range(self) -> tuple[float, float]:
        # Screen y grows downward, so larger values sit closer to the top margin.
        return self.plot_bottom, self.plot_top

    def x_tick_count(self) -> int:
        return max(1, int(self.width / 80))

    def y_tick_count(self) -> int:
        return max(1, int(self.height / 48))
