"""Backend-independent layout of one chart: scales, path, ticks, overlay."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from core.dataset import Dataset, time_domain, value_domain
from core.errors import EmptyDatasetError
from core.formatting import axis_title
from core.hover import HoverController
from core.path_builder import PathGeometry, build_path
from core.scales import LinearScale, TimeScale, build_time_scale, build_value_scale
from core.ticks import linear_ticks, time_ticks
from core.viewport import Viewport

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisTicks:
    values: np.ndarray
    pixels: np.ndarray


@dataclass(frozen=True)
class ChartModel:
    dataset: Dataset
    viewport: Viewport
    time_scale: TimeScale
    value_scale: LinearScale
    path: PathGeometry
    area: PathGeometry
    x_ticks: AxisTicks
    y_ticks: AxisTicks
    y_title: str

    @property
    def overlay_rect(self) -> tuple[float, float, float, float]:
        """(x, y, width, height) of the region that receives pointer events."""
        vp = self.viewport
        return vp.plot_left, vp.plot_top, vp.plot_width, vp.plot_height

    def hover_controller(self) -> HoverController:
        return HoverController(self.dataset, self.time_scale, self.value_scale, self.viewport)


def build_chart(dataset: Dataset, viewport: Viewport) -> ChartModel:
    """
    Compute everything needed to draw ``dataset`` inside ``viewport``.
    Raises ``EmptyDatasetError`` before anything is laid out when there is nothing to draw.
    """
    if dataset.is_empty:
        raise EmptyDatasetError("dataset has no samples; nothing to render")

    time_scale = build_time_scale(time_domain(dataset), viewport.time_range())
    value_scale = build_value_scale(value_domain(dataset), viewport.value_range())

    path = build_path(dataset.samples, time_scale, value_scale)
    baseline = float(value_scale.to_pixel(0.0))
    area = path.closed_area(baseline)

    t0, t1 = time_scale.seconds.domain
    x_vals = time_ticks(t0, t1, viewport.x_tick_count(), tz=dataset.tzinfo())
    v0, v1 = value_scale.domain
    y_vals = linear_ticks(v0, v1, viewport.y_tick_count())

    model = ChartModel(
        dataset=dataset,
        viewport=viewport,
        time_scale=time_scale,
        value_scale=value_scale,
        path=path,
        area=area,
        x_ticks=AxisTicks(x_vals, np.asarray(time_scale.to_pixel(x_vals))),
        y_ticks=AxisTicks(y_vals, np.asarray(value_scale.to_pixel(y_vals))),
        y_title=axis_title(dataset.unit),
    )
    LOG.debug(
        "Chart laid out: %d samples, value domain %.3f..%.3f %s",
        len(dataset),
        v0,
        v1,
        dataset.unit,
    )
    return model
