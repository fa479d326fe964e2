"""
Chart view (right side) for TailPlot.

Hosts the matplotlib FigureCanvas and its navigation toolbar.  The
figure itself is driven by ``LiveChart``.
"""

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout

import matplotlib
matplotlib.use('QtAgg')
from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import (
    FigureCanvasQTAgg as FigureCanvas,
    NavigationToolbar2QT as NavigationToolbar,
)

from .constants import DARK_COLORS


class ChartView(QWidget):
    """Figure canvas with a navigation toolbar above it."""

    def __init__(self, figsize=(8, 5), parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        self._fig = Figure(figsize=figsize)
        self._fig.set_facecolor(DARK_COLORS['bg_alt'])
        self._canvas = FigureCanvas(self._fig)
        self._toolbar = NavigationToolbar(self._canvas, self)

        toolbar_row = QHBoxLayout()
        toolbar_row.setSpacing(4)
        toolbar_row.addWidget(self._toolbar)
        toolbar_row.addStretch()
        layout.addLayout(toolbar_row)

        layout.addWidget(self._canvas, 1)

    @property
    def fig(self) -> Figure:
        return self._fig

    @property
    def canvas(self) -> FigureCanvas:
        return self._canvas

    def refresh(self):
        """Schedule a redraw; repeated calls before the paint coalesce."""
        self._canvas.draw_idle()
