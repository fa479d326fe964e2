"""
Settings panel (left side) for TailPlot.

Auto-scale toggles per axis, the auto-restart toggle, and the Restart
button.  The panel only emits signals; the main window applies them.
"""

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QCheckBox, QPushButton, QLabel,
)
from PySide6.QtCore import Signal

from .constants import DARK_COLORS
from .data_model import Axis


class SettingsPanel(QWidget):
    """Left-side panel with chart and source controls."""

    # Signals
    auto_scale_toggled = Signal(object, bool)  # (Axis, enabled)
    auto_restart_toggled = Signal(bool)
    restart_requested = Signal()

    def __init__(self, use_y2=False, restartable=True, auto_restart=True,
                 parent=None):
        super().__init__(parent)
        self._use_y2 = use_y2
        self._restartable = restartable
        self._setup_ui(auto_restart)
        self._connect_signals()

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self, auto_restart):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(8)

        # ── Group 1: Axes ────────────────────────────────────────────
        grp_axes = QGroupBox("Axes")
        axes_layout = QVBoxLayout(grp_axes)
        axes_layout.setSpacing(4)

        self._chk_auto = {}
        labels = [(Axis.X, "Auto-scale X axis"), (Axis.PRIMARY, "Auto-scale Y axis")]
        if self._use_y2:
            labels.append((Axis.SECONDARY, "Auto-scale Y2 axis"))
        for axis, label in labels:
            chk = QCheckBox(label)
            chk.setChecked(True)
            axes_layout.addWidget(chk)
            self._chk_auto[axis] = chk

        layout.addWidget(grp_axes)

        # ── Group 2: Source ──────────────────────────────────────────
        grp_source = QGroupBox("Source")
        source_layout = QVBoxLayout(grp_source)
        source_layout.setSpacing(4)

        self._chk_auto_restart = QCheckBox("Auto-restart if file shrinks")
        self._chk_auto_restart.setChecked(self._restartable and auto_restart)
        self._chk_auto_restart.setEnabled(self._restartable)
        source_layout.addWidget(self._chk_auto_restart)

        self._btn_restart = QPushButton("Restart")
        self._btn_restart.setToolTip(
            "Clear the chart and read the file again from the beginning"
        )
        self._btn_restart.setEnabled(self._restartable)
        source_layout.addWidget(self._btn_restart)

        if not self._restartable:
            note = QLabel("Standard input cannot be restarted.")
            note.setStyleSheet(
                f"color: {DARK_COLORS['fg_dim']}; font-size: 11px;"
            )
            note.setWordWrap(True)
            source_layout.addWidget(note)

        layout.addWidget(grp_source)
        layout.addStretch()

    def _connect_signals(self):
        for axis, chk in self._chk_auto.items():
            chk.toggled.connect(
                lambda checked, a=axis: self.auto_scale_toggled.emit(a, checked)
            )
        self._chk_auto_restart.toggled.connect(self.auto_restart_toggled.emit)
        # Lambda absorbs the bool argument from clicked(bool)
        self._btn_restart.clicked.connect(
            lambda *_: self.restart_requested.emit()
        )

    # ── Accessors ────────────────────────────────────────────────────

    def is_auto_scaled(self, axis: Axis) -> bool:
        chk = self._chk_auto.get(axis)
        return chk is not None and chk.isChecked()

    @property
    def restart_button(self) -> QPushButton:
        return self._btn_restart
