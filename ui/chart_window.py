# ui/chart_window.py
from __future__ import annotations

import logging
from typing import Callable

from PySide6 import QtCore, QtWidgets

from core.dataset import Dataset
from core.errors import ChartError
from core.viewport import Viewport
from ui.chart_renderer import ChartRenderer, RenderHandle
from ui.themes import ThemeDefinition, resolve_theme

LOG = logging.getLogger(__name__)

DatasetSource = Callable[[], Dataset]


class _FetchWorker(QtCore.QObject):
    finished = QtCore.Signal(object)
    failed = QtCore.Signal(str)

    def __init__(self, source: DatasetSource):
        super().__init__()
        self._source = source

    @QtCore.Slot()
    def run(self):
        try:
            dataset = self._source()
        except ChartError as exc:
            LOG.warning("Fetching energy data failed: %s", exc)
            self.failed.emit(str(exc))
            return
        except Exception as exc:  # pragma: no cover - UI feedback
            LOG.exception("Unexpected error while fetching energy data")
            self.failed.emit(f"{type(exc).__name__}: {exc}")
            return
        self.finished.emit(dataset)


def _disconnect_results(worker: _FetchWorker, window: "ChartWindow") -> None:
    try:
        worker.finished.disconnect(window.show_dataset)
        worker.failed.disconnect(window.show_error)
    except (RuntimeError, TypeError):
        LOG.debug("Fetch worker already disconnected", exc_info=True)


class ChartWindow(QtWidgets.QMainWindow):
    """Shows a status line while data loads, then either the chart or the error."""

    def __init__(
        self,
        viewport: Viewport,
        *,
        theme: ThemeDefinition | str | None = None,
        title: str = "Energy",
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        if not isinstance(theme, ThemeDefinition):
            theme = resolve_theme(theme)
        self.theme = theme
        self.renderer = ChartRenderer(viewport, theme=theme)
        self.handle: RenderHandle | None = None
        self.error_text: str | None = None
        self._fetch_thread: QtCore.QThread | None = None
        self._fetch_worker: _FetchWorker | None = None
        self._closing = False

        self.setWindowTitle(title)
        self.setStyleSheet(theme.stylesheet)
        container = QtWidgets.QWidget(self)
        self._layout = QtWidgets.QVBoxLayout(container)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self.statusLabel = QtWidgets.QLabel("Loading…", container)
        self.statusLabel.setObjectName("statusLabel")
        self._layout.addWidget(self.statusLabel)
        self.setCentralWidget(container)

    # ----- loading -----

    def load(self, source: DatasetSource) -> None:
        """Run ``source`` on a worker thread and render its result on the GUI thread."""
        self._cleanup_fetch_thread(wait=True)
        self._closing = False
        self._show_status("Loading…")
        self._fetch_thread = QtCore.QThread(self)
        self._fetch_worker = _FetchWorker(source)
        self._fetch_worker.moveToThread(self._fetch_thread)
        self._fetch_thread.started.connect(self._fetch_worker.run)
        self._fetch_worker.finished.connect(self.show_dataset)
        self._fetch_worker.failed.connect(self.show_error)
        self._fetch_worker.finished.connect(self._fetch_thread.quit)
        self._fetch_worker.failed.connect(self._fetch_thread.quit)
        self._fetch_thread.finished.connect(self._cleanup_fetch_thread)
        self._fetch_thread.start()

    @QtCore.Slot(object)
    def show_dataset(self, dataset: Dataset) -> None:
        if self._closing:
            LOG.debug("Window closed; dropping fetched dataset")
            return
        self._dispose_chart()
        try:
            handle = self.renderer.render(dataset, parent=self.centralWidget())
        except ChartError as exc:
            LOG.warning("Chart not rendered: %s", exc)
            self.show_error(str(exc))
            return
        self.handle = handle
        self.error_text = None
        self.statusLabel.hide()
        self._layout.addWidget(handle.widget, alignment=QtCore.Qt.AlignCenter)
        self.adjustSize()

    @QtCore.Slot(str)
    def show_error(self, message: str) -> None:
        if self._closing:
            LOG.debug("Window closed; dropping fetch error: %s", message)
            return
        self._dispose_chart()
        self.error_text = message
        self.statusLabel.setObjectName("errorLabel")
        self.statusLabel.setText(f"Could not draw chart: {message}")
        self._restyle_status()
        self.statusLabel.show()

    def _show_status(self, text: str) -> None:
        self.statusLabel.setObjectName("statusLabel")
        self.statusLabel.setText(text)
        self._restyle_status()
        self.statusLabel.show()

    def _restyle_status(self) -> None:
        style = self.statusLabel.style()
        style.unpolish(self.statusLabel)
        style.polish(self.statusLabel)

    # ----- teardown -----

    def _dispose_chart(self) -> None:
        handle, self.handle = self.handle, None
        if handle is None:
            return
        handle.dispose()
        self._layout.removeWidget(handle.widget)
        handle.widget.deleteLater()

    def _cleanup_fetch_thread(self, *, wait: bool = False):
        thread = self._fetch_thread
        worker = self._fetch_worker
        if thread is not None and thread.isRunning() and not wait:
            return
        self._fetch_thread = None
        self._fetch_worker = None
        if worker is not None:
            if wait:
                _disconnect_results(worker, self)
            worker.deleteLater()
        if thread is not None:
            if wait and thread.isRunning():
                thread.quit()
                thread.wait()
            if thread.isFinished():
                thread.deleteLater()

    def closeEvent(self, event):
        self._closing = True
        self._cleanup_fetch_thread(wait=True)
        self._dispose_chart()
        super().closeEvent(event)
