"""Headless smoke tests for the PySide6 chart window and renderer."""

from __future__ import annotations

import os
import time
from datetime import datetime, timedelta, timezone

import pytest

try:  # pragma: no cover - environment-dependent import guard
    from PySide6 import QtCore, QtWidgets
except ImportError as exc:  # pragma: no cover - skip when Qt dependencies missing
    pytest.skip(f"PySide6 import failed: {exc}", allow_module_level=True)

from core.dataset import Dataset, parse_dataset
from core.errors import TransportError
from core.hover import HoverPhase
from core.viewport import Viewport
from ui.chart_renderer import ChartRenderer
from ui.chart_window import ChartWindow
from ui.themes import THEMES


# Ensure the tests run with Qt's offscreen platform.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PAYLOAD = {
    "unit": "kWh",
    "values": [
        {"date": "2024-01-01T00:00:00Z", "value": 10},
        {"date": "2024-01-01T01:00:00Z", "value": None},
        {"date": "2024-01-01T02:00:00Z", "value": 30},
    ],
}


@pytest.fixture(scope="session")
def qt_app():
    """Provide a global QApplication for headless UI tests."""

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app


def _wait_for(app, predicate, timeout_s: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        app.processEvents()
        if predicate():
            return True
        time.sleep(0.01)
    app.processEvents()
    return predicate()


def test_renderer_draws_fixed_size_canvas(qt_app):
    vp = Viewport()
    handle = ChartRenderer(vp).render(parse_dataset(PAYLOAD))
    try:
        assert handle.widget.width() == 928
        assert handle.widget.height() == 500
        assert not handle.overlay.visible
        assert handle.model.y_title == "energy (kWh)"
    finally:
        handle.dispose()
        handle.widget.deleteLater()


def test_pointer_move_shows_overlay_and_leave_hides_it(qt_app):
    handle = ChartRenderer(Viewport(), theme=THEMES["Midnight"]).render(parse_dataset(PAYLOAD))
    try:
        px = handle.model.time_scale.to_pixel(datetime(2024, 1, 1, 0, 45, tzinfo=timezone.utc))
        update = handle.pointer_move(px, 200.0)
        assert update.visible
        assert handle.overlay.visible
        assert handle.overlay.marker.isVisible()
        assert handle.overlay.tooltip.isVisible()
        assert "01:00" in handle.overlay.tooltip.textItem.toPlainText()
        assert "0.00 kWh" in handle.overlay.tooltip.textItem.toPlainText()
        assert handle.controller.phase is HoverPhase.ACTIVE

        again = handle.pointer_move(px, 200.0)
        assert again == update
        assert handle.overlay.last_update == update

        handle.pointer_leave()
        assert not handle.overlay.visible
        assert not handle.overlay.tooltip.isVisible()
        assert handle.controller.phase is HoverPhase.IDLE
    finally:
        handle.dispose()
        handle.widget.deleteLater()


def test_pointer_in_margin_does_not_hover(qt_app):
    vp = Viewport()
    handle = ChartRenderer(vp).render(parse_dataset(PAYLOAD))
    try:
        update = handle.pointer_move(vp.plot_left / 2.0, 200.0)
        assert not update.visible
        assert not handle.overlay.visible
    finally:
        handle.dispose()
        handle.widget.deleteLater()


def test_dispose_releases_subscriptions(qt_app):
    handle = ChartRenderer(Viewport()).render(parse_dataset(PAYLOAD))
    handle.pointer_move(400.0, 200.0)
    handle.dispose()
    assert handle.disposed
    assert not handle.overlay.visible
    # Scene events after teardown are ignored.
    handle.canvas.scene().sigMouseMoved.emit(QtCore.QPointF(400.0, 200.0))
    assert not handle.overlay.visible
    handle.dispose()
    handle.widget.deleteLater()


def test_window_renders_dataset_from_worker(qt_app):
    window = ChartWindow(Viewport(), theme="light")
    try:
        window.load(lambda: parse_dataset(PAYLOAD))
        assert _wait_for(qt_app, lambda: window.handle is not None)
        assert window.error_text is None
        assert not window.statusLabel.isVisible()
    finally:
        window.close()
    assert window.handle is None


def test_window_reports_transport_error(qt_app):
    def failing():
        raise TransportError("Response status: 500", status=500)

    window = ChartWindow(Viewport())
    try:
        window.load(failing)
        assert _wait_for(qt_app, lambda: window.error_text is not None)
        assert window.handle is None
        assert "500" in window.statusLabel.text()
    finally:
        window.close()


def test_window_refuses_empty_dataset(qt_app):
    window = ChartWindow(Viewport())
    try:
        window.show_dataset(Dataset(unit="Wh"))
        assert window.handle is None
        assert window.error_text is not None
        assert "no samples" in window.error_text
    finally:
        window.close()


def test_window_replaces_previous_chart(qt_app):
    window = ChartWindow(Viewport())
    try:
        window.show_dataset(parse_dataset(PAYLOAD))
        first = window.handle
        later = {
            "unit": "Wh",
            "values": [
                {"date": (datetime(2024, 1, 2, tzinfo=timezone.utc) + timedelta(hours=h)).isoformat(), "value": h}
                for h in range(4)
            ],
        }
        window.show_dataset(parse_dataset(later))
        assert window.handle is not None
        assert window.handle is not first
        assert first.disposed
    finally:
        window.close()


def test_closing_during_fetch_drops_late_result(qt_app):
    def slow_source():
        time.sleep(0.3)
        return parse_dataset(PAYLOAD)

    window = ChartWindow(Viewport())
    window.load(slow_source)
    window.close()
    deadline = time.monotonic() + 1.0
    while time.monotonic() < deadline:
        qt_app.processEvents()
        time.sleep(0.01)
    assert window.handle is None
    assert window.error_text is None
