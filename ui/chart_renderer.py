"""pyqtgraph drawing of a laid-out chart plus the hover overlay wiring."""

from __future__ import annotations

import html
import logging

import pyqtgraph as pg
from PySide6 import QtCore, QtWidgets

from core.chart_model import ChartModel, build_chart
from core.dataset import Dataset
from core.formatting import format_tick_values
from core.hover import HIDDEN_UPDATE, HoverController, ViewUpdate
from core.viewport import Viewport
from ui.themes import DEFAULT_THEME, THEMES, ThemeDefinition
from ui.time_axis_formatter import TimeTickFormatter

LOG = logging.getLogger(__name__)

TICK_SIZE = 6.0
TICK_PADDING = 3.0
MARKER_SIZE = 10.0


class ChartCanvas(pg.GraphicsView):
    """Fixed-size view whose scene coordinates equal viewport pixels (y grows downward)."""

    pointerLeft = QtCore.Signal()

    def __init__(self, viewport: Viewport, *, background: str, parent: QtWidgets.QWidget | None = None):
        super().__init__(parent, background=background)
        self.viewport = viewport
        self.vb = pg.ViewBox(enableMouse=False, enableMenu=False, invertY=True, defaultPadding=0.0)
        self.vb.setMouseEnabled(x=False, y=False)
        self.vb.disableAutoRange()
        self.setCentralItem(self.vb)
        self.setFixedSize(int(round(viewport.width)), int(round(viewport.height)))
        self.vb.setRange(xRange=(0.0, viewport.width), yRange=(0.0, viewport.height), padding=0.0)

    def leaveEvent(self, ev):  # pragma: no cover - needs a real pointer
        super().leaveEvent(ev)
        self.pointerLeft.emit()

    def map_scene_to_pixels(self, scene_pos: QtCore.QPointF) -> tuple[float, float]:
        point = self.vb.mapSceneToView(scene_pos)
        return float(point.x()), float(point.y())


def _segment(x0: float, y0: float, x1: float, y1: float, pen) -> pg.PlotCurveItem:
    return pg.PlotCurveItem(x=[x0, x1], y=[y0, y1], pen=pen)


def _draw_static(canvas: ChartCanvas, model: ChartModel, theme: ThemeDefinition) -> None:
    vb = canvas.vb
    vp = model.viewport
    left, top, right, bottom = vp.plot_rect
    axis_pen = pg.mkPen(theme.foreground, width=1.0)
    grid_color = pg.mkColor(theme.foreground)
    grid_color.setAlphaF(theme.grid_alpha)
    grid_pen = pg.mkPen(grid_color, width=1.0)

    # x axis along the bottom of the plot area; outer ticks omitted.
    vb.addItem(_segment(left, bottom, right, bottom, axis_pen))
    time_labels = TimeTickFormatter(tz=model.time_scale.tz).format_ticks(model.x_ticks.values)
    for px, label in zip(model.x_ticks.pixels.tolist(), time_labels):
        vb.addItem(_segment(px, bottom, px, bottom + TICK_SIZE, axis_pen))
        text = pg.TextItem(label, color=theme.foreground, anchor=(0.5, 0.0))
        text.setPos(px, bottom + TICK_SIZE + TICK_PADDING)
        vb.addItem(text)

    # y axis: no domain line, tick marks, and gridlines across the plot area.
    value_labels = format_tick_values(model.y_ticks.values)
    for py, label in zip(model.y_ticks.pixels.tolist(), value_labels):
        vb.addItem(_segment(left - TICK_SIZE, py, left, py, axis_pen))
        vb.addItem(_segment(left, py, right, py, grid_pen))
        text = pg.TextItem(label, color=theme.foreground, anchor=(1.0, 0.5))
        text.setPos(left - TICK_SIZE - TICK_PADDING, py)
        vb.addItem(text)
    title = pg.TextItem(model.y_title, color=theme.foreground, anchor=(0.0, 0.5))
    title.setPos(0.0, 10.0)
    vb.addItem(title)

    baseline = float(model.value_scale.to_pixel(0.0))
    curve = pg.PlotCurveItem(
        x=model.path.xs,
        y=model.path.ys,
        pen=pg.mkPen(theme.line_color, width=theme.line_width),
        fillLevel=baseline,
        brush=pg.mkBrush(theme.fill_color),
    )
    vb.addItem(curve)


class HoverOverlay:
    """Crosshair, marker and tooltip items driven by ``ViewUpdate`` values."""

    def __init__(self, vb: pg.ViewBox, theme: ThemeDefinition) -> None:
        self.crosshair = pg.PlotCurveItem(
            x=[0.0, 0.0],
            y=[0.0, 0.0],
            pen=pg.mkPen(theme.crosshair_color, width=1.0, style=QtCore.Qt.DashLine),
        )
        self.crosshair.setZValue(1000)
        self.marker = pg.ScatterPlotItem(
            size=MARKER_SIZE,
            pen=pg.mkPen(theme.marker_edge, width=2.0),
            brush=pg.mkBrush(theme.marker_fill),
        )
        self.marker.setZValue(1001)
        self.tooltip = pg.TextItem(
            anchor=(0.0, 0.0),
            color=theme.tooltip_text,
            fill=pg.mkBrush(theme.tooltip_background),
            border=pg.mkPen(theme.crosshair_color),
        )
        self.tooltip.setZValue(1002)
        for item in (self.crosshair, self.marker, self.tooltip):
            item.setVisible(False)
            vb.addItem(item, ignoreBounds=True)
        self.last_update: ViewUpdate = HIDDEN_UPDATE

    @property
    def visible(self) -> bool:
        return self.crosshair.isVisible()

    def apply(self, update: ViewUpdate) -> None:
        self.last_update = update
        if not update.visible:
            self.crosshair.setVisible(False)
            self.marker.setVisible(False)
            self.tooltip.setVisible(False)
            return
        x = update.crosshair_x
        self.crosshair.setData(x=[x, x], y=[update.crosshair_y1, update.crosshair_y2])
        mx, my = update.marker
        self.marker.setData(x=[mx], y=[my])
        self.tooltip.setHtml(
            f"<strong>{html.escape(update.tooltip_title)}</strong><br/>"
            f"{html.escape(update.tooltip_body)}"
        )
        self.tooltip.setPos(*update.tooltip_pos)
        self.crosshair.setVisible(True)
        self.marker.setVisible(True)
        self.tooltip.setVisible(True)


class RenderHandle:
    """A drawn chart. ``dispose()`` releases every pointer subscription."""

    def __init__(
        self,
        canvas: ChartCanvas,
        model: ChartModel,
        controller: HoverController,
        overlay: HoverOverlay,
    ) -> None:
        self.canvas = canvas
        self.model = model
        self.controller = controller
        self.overlay = overlay
        self._connected = False
        self._connect()

    @property
    def widget(self) -> QtWidgets.QWidget:
        return self.canvas

    @property
    def disposed(self) -> bool:
        return not self._connected

    def _connect(self) -> None:
        self.canvas.scene().sigMouseMoved.connect(self._on_scene_mouse_moved)
        self.canvas.pointerLeft.connect(self.pointer_leave)
        self._connected = True

    def pointer_move(self, pixel_x: float, pixel_y: float | None = None) -> ViewUpdate:
        update = self.controller.on_pointer_move(pixel_x, pixel_y)
        self.overlay.apply(update)
        return update

    def pointer_leave(self) -> ViewUpdate:
        update = self.controller.on_pointer_leave()
        self.overlay.apply(update)
        return update

    def _on_scene_mouse_moved(self, scene_pos: QtCore.QPointF) -> None:
        if not self._connected:
            return
        x, y = self.canvas.map_scene_to_pixels(scene_pos)
        self.pointer_move(x, y)

    def dispose(self) -> None:
        if not self._connected:
            return
        self._connected = False
        try:
            self.canvas.scene().sigMouseMoved.disconnect(self._on_scene_mouse_moved)
            self.canvas.pointerLeft.disconnect(self.pointer_leave)
        except (RuntimeError, TypeError):
            LOG.debug("Hover signals already disconnected", exc_info=True)
        self.pointer_leave()


class ChartRenderer:
    """Composition root: lays out a dataset, draws it once, and wires hover."""

    def __init__(self, viewport: Viewport, *, theme: ThemeDefinition | None = None) -> None:
        self.viewport = viewport
        self.theme = theme or THEMES[DEFAULT_THEME]

    def render(self, dataset: Dataset, *, parent: QtWidgets.QWidget | None = None) -> RenderHandle:
        """
        Draw ``dataset``. Layout errors (e.g. ``EmptyDatasetError``) are raised
        before any widget is created, so a failed render leaves nothing behind.
        """
        model = build_chart(dataset, self.viewport)
        canvas = ChartCanvas(self.viewport, background=self.theme.background, parent=parent)
        _draw_static(canvas, model, self.theme)
        overlay = HoverOverlay(canvas.vb, self.theme)
        handle = RenderHandle(canvas, model, model.hover_controller(), overlay)
        LOG.info("Rendered %d samples (%s)", len(dataset), dataset.unit)
        return handle
