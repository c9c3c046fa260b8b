"""Pointer-driven hover state, kept free of any drawing backend."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Sequence

from core.dataset import Dataset, Sample
from core.errors import EmptyDatasetError
from core.formatting import format_clock, format_quantity
from core.nearest import NearestSampleLocator
from core.path_builder import MISSING_VALUE_FILL
from core.scales import LinearScale, TimeScale
from core.viewport import Viewport

LOG = logging.getLogger(__name__)

# Tooltip sits to the right of and above the pointer.
TOOLTIP_OFFSET: tuple[float, float] = (15.0, -28.0)


class HoverPhase(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class HoverState:
    visible: bool
    active_sample: Sample | None
    pixel_x: float | None
    pixel_y: float | None


IDLE_STATE = HoverState(False, None, None, None)


@dataclass(frozen=True, slots=True)
class ViewUpdate:
    """Everything a backend needs to draw (or hide) the hover overlay."""

    visible: bool
    crosshair_x: float | None = None
    crosshair_y1: float | None = None
    crosshair_y2: float | None = None
    marker: tuple[float, float] | None = None
    tooltip_title: str = ""
    tooltip_body: str = ""
    tooltip_pos: tuple[float, float] | None = None

    @property
    def tooltip_text(self) -> str:
        if not self.visible:
            return ""
        return f"{self.tooltip_title}\n{self.tooltip_body}"


HIDDEN_UPDATE = ViewUpdate(False)


class HoverController:
    """
    Two-state machine (idle/active) fed by pointer events in chart pixel coordinates.

    Every event rebuilds ``state`` from scratch and returns a ``ViewUpdate``.
    Lookup failures never escape: the controller falls back to idle instead.
    """

    def __init__(
        self,
        samples: Dataset | Sequence[Sample],
        time_scale: TimeScale,
        value_scale: LinearScale,
        viewport: Viewport,
        *,
        unit: str | None = None,
        tooltip_offset: tuple[float, float] = TOOLTIP_OFFSET,
    ) -> None:
        if unit is None:
            unit = samples.unit if isinstance(samples, Dataset) else ""
        self._locator = NearestSampleLocator(samples)
        self._time_scale = time_scale
        self._value_scale = value_scale
        self._viewport = viewport
        self._unit = unit
        self._tooltip_offset = tooltip_offset
        self._state = IDLE_STATE

    @property
    def state(self) -> HoverState:
        return self._state

    @property
    def phase(self) -> HoverPhase:
        return HoverPhase.ACTIVE if self._state.visible else HoverPhase.IDLE

    def on_pointer_move(self, pixel_x: float, pixel_y: float | None = None) -> ViewUpdate:
        if not self._viewport.contains(pixel_x, pixel_y):
            return self.on_pointer_leave()
        try:
            state, update = self._resolve(pixel_x, pixel_y)
        except EmptyDatasetError:
            LOG.debug("Hover ignored: no samples to show")
            return self.on_pointer_leave()
        except Exception:
            LOG.warning("Hover update failed at x=%.1f", pixel_x, exc_info=True)
            return self.on_pointer_leave()
        self._state = state
        return update

    def on_pointer_leave(self) -> ViewUpdate:
        self._state = IDLE_STATE
        return HIDDEN_UPDATE

    def _resolve(self, pixel_x: float, pixel_y: float | None) -> tuple[HoverState, ViewUpdate]:
        query_s = self._time_scale.to_domain_seconds(pixel_x)
        sample = self._locator.locate(query_s)
        value = MISSING_VALUE_FILL if sample.value is None else sample.value
        x = float(self._time_scale.to_pixel(sample.timestamp))
        y = float(self._value_scale.to_pixel(value))

        anchor_y = y if pixel_y is None else pixel_y
        dx, dy = self._tooltip_offset
        update = ViewUpdate(
            visible=True,
            crosshair_x=x,
            crosshair_y1=self._viewport.plot_top,
            crosshair_y2=self._viewport.plot_bottom,
            marker=(x, y),
            tooltip_title=format_clock(sample.timestamp),
            tooltip_body=format_quantity(value, self._unit),
            tooltip_pos=(pixel_x + dx, anchor_y + dy),
        )
        return HoverState(True, sample, x, y), update
