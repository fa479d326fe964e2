"""
Main window for TailPlot.

Hosts the SettingsPanel (left) and ChartView (right) in a horizontal
splitter, with a menu bar and status bar.  Owns the pipeline: the
producer runs on a background thread and asks for flushes through a
queued signal, so every chart update happens on the GUI thread.
"""

import sys
import threading

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QSplitter,
    QMessageBox,
)
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtCore import QObject, Qt, Signal, Slot

from . import APP_NAME, APP_VERSION
from .chart_live import LiveChart
from .config import TailPlotConfig
from .data_model import Axis
from .gui_chart_view import ChartView
from .gui_settings_panel import SettingsPanel
from .pipeline import Producer, build_pipeline
from .theme import apply_plot_style


class IngestWorker(QObject):
    """Runs ``Producer.run`` on a daemon thread.

    A daemon ``threading.Thread`` rather than a ``QThread``: a read
    blocked on standard input cannot be interrupted, and must not keep
    the process alive after the window closes.

    Signals
    -------
    failed : Signal(str)
        The producer raised (e.g. the file could not be read).
    finished : Signal()
        The source ended (standard input reached end-of-input).
    """

    failed = Signal(str)
    finished = Signal()

    def __init__(self, producer: Producer, parent=None):
        super().__init__(parent)
        self._producer = producer
        self._thread = threading.Thread(
            target=self._run, name="tailplot-producer", daemon=True,
        )

    def start(self):
        self._thread.start()

    def stop(self, timeout=None):
        """Ask the producer to stop and wait up to *timeout* seconds."""
        self._producer.stop()
        if self._thread.is_alive():
            self._thread.join(timeout)

    def _run(self):
        try:
            self._producer.run()
        except Exception as exc:
            self.failed.emit(f"{type(exc).__name__}: {exc}")
        else:
            self.finished.emit()


class TailPlotWindow(QMainWindow):
    """Main window: live chart of one file or stream."""

    # Emitted from the producer thread; delivered on the GUI thread
    flush_requested = Signal()

    def __init__(self, config: TailPlotConfig):
        super().__init__()
        self._config = config
        self._exit_code = 0

        self.setWindowTitle(config.display_title)
        self.setMinimumSize(800, 500)

        apply_plot_style()
        self._setup_ui()
        self._setup_pipeline()
        self._setup_menu()
        self._connect_signals()

        self.statusBar().showMessage("Waiting for data...")

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        config = self._config
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        self._settings = SettingsPanel(
            use_y2=config.uses_y2,
            restartable=not config.is_stream,
            auto_restart=config.auto_restart,
        )
        self._chart_view = ChartView()
        self._chart = LiveChart(
            self._chart_view.fig,
            title=config.display_title,
            use_y2=config.uses_y2,
            x_format=config.x_format,
            y_format=config.y_format,
            y2_format=config.y2_format,
        )

        splitter.addWidget(self._settings)
        splitter.addWidget(self._chart_view)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        # Settings start collapsed, like a one-touch-expandable divider
        splitter.setCollapsible(0, True)
        splitter.setSizes([0, 800])

        main_layout.addWidget(splitter)

    def _setup_pipeline(self):
        self._producer, self._buffer, self._feed = build_pipeline(
            self._config,
            self._chart,
            lambda callback: self.flush_requested.emit(),
        )
        self._worker = IngestWorker(self._producer, self)

    def _setup_menu(self):
        menubar = self.menuBar()

        # ── File menu ────────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        act_restart = QAction("Restart", self)
        act_restart.setShortcut(QKeySequence("Ctrl+R"))
        act_restart.setEnabled(not self._config.is_stream)
        act_restart.triggered.connect(lambda *_: self._on_restart())
        file_menu.addAction(act_restart)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        # ── Help menu ────────────────────────────────────────────────
        help_menu = menubar.addMenu("Help")

        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    def _connect_signals(self):
        self.flush_requested.connect(
            self._on_flush_requested, Qt.ConnectionType.QueuedConnection
        )
        self._worker.failed.connect(self._on_source_failed)
        self._worker.finished.connect(self._on_source_finished)
        self._settings.auto_scale_toggled.connect(self._on_auto_scale_toggled)
        self._settings.auto_restart_toggled.connect(
            self._producer.reader.set_auto_restart
        )
        self._settings.restart_requested.connect(self._on_restart)

    # ── Lifecycle ────────────────────────────────────────────────────

    @property
    def exit_code(self) -> int:
        return self._exit_code

    def start(self):
        """Begin ingesting.  Call once the window is shown."""
        self._worker.start()

    def closeEvent(self, event):
        self._worker.stop(timeout=2 * self._config.poll_interval)
        super().closeEvent(event)

    # ── Slots ────────────────────────────────────────────────────────

    @Slot()
    def _on_flush_requested(self):
        self._buffer.flush()
        self._chart_view.refresh()
        self._show_counts()

    def _show_counts(self, prefix=""):
        message = f"{prefix}{self._feed.points} points"
        problems = self._producer.problems
        if problems:
            message += f", {problems} lines with problems (see console)"
        self.statusBar().showMessage(message)

    def _on_auto_scale_toggled(self, axis: Axis, enabled: bool):
        self._chart.set_auto_scale(axis, enabled)
        self._feed.set_auto_scale(axis, enabled)
        self._chart_view.refresh()

    def _on_restart(self):
        if self._producer.request_restart():
            self.statusBar().showMessage("Restarting...")

    def _on_source_finished(self):
        # Points still queued behind the last flush signal
        self._buffer.flush()
        self._chart_view.refresh()
        self._show_counts(prefix="End of input: ")

    def _on_source_failed(self, message: str):
        print(f"[TailPlot] Source error: {message}", file=sys.stderr)
        self._exit_code = 1
        QApplication.instance().exit(self._exit_code)

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>Plots a file, displaying new data as it is generated "
            f"(analogous to 'tail -f').</p>"
            f"<p>Axes auto-scale to the data seen so far; the plot "
            f"restarts when the file is truncated.</p>",
        )
