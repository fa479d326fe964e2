"""
Live line chart for TailPlot.

A ``DisplayAdapter`` that draws on a plain matplotlib ``Figure``: one
line per field, a twin Y axis for secondary fields, colours taken from
the fixed series table in field order.  It never redraws by itself; the
hosting widget calls ``draw_idle`` after each flush.
"""

from typing import List, Optional, Sequence, Tuple

from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from .constants import EMPTY_AXIS_RANGE, series_color
from .data_model import Axis, Field, Point
from .display import DisplayAdapter
from .formats import FieldFormat


class _Series:
    """Accumulated data of one field and the line that shows it."""

    def __init__(self, field: Field, line):
        self.field = field
        self.line = line
        self.xs: List[float] = []
        self.ys: List[float] = []

    def clear(self) -> None:
        self.xs.clear()
        self.ys.clear()
        self.line.set_data(self.xs, self.ys)


def _tick_formatter(fmt: FieldFormat) -> FuncFormatter:
    return FuncFormatter(lambda value, pos: fmt.format(value))


class LiveChart(DisplayAdapter):
    """Render the pipeline's output on *fig*.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
        Figure to draw on (will be cleared).
    title : str
        Axes title.
    use_y2 : bool
        Create a secondary Y axis for ``Axis.SECONDARY`` fields.
    x_format, y_format, y2_format : FieldFormat, optional
        Tick label formats.
    """

    def __init__(
        self,
        fig: Figure,
        *,
        title: str = "",
        use_y2: bool = False,
        x_format: Optional[FieldFormat] = None,
        y_format: Optional[FieldFormat] = None,
        y2_format: Optional[FieldFormat] = None,
    ):
        self._fig = fig
        self._series: List[_Series] = []
        self._auto_scaled = {axis: True for axis in Axis}

        fig.clf()
        self._ax = fig.add_subplot(111)
        self._ax2 = self._ax.twinx() if use_y2 else None
        self._ax.set_title(title, fontsize=10, fontweight='bold')
        self._ax.grid(linewidth=0.4, alpha=0.5)

        if x_format is not None:
            self._ax.xaxis.set_major_formatter(_tick_formatter(x_format))
        if y_format is not None:
            self._ax.yaxis.set_major_formatter(_tick_formatter(y_format))
        if self._ax2 is not None and y2_format is not None:
            self._ax2.yaxis.set_major_formatter(_tick_formatter(y2_format))

        for axes in self._all_axes():
            axes.set_autoscale_on(False)
        self._reset_limits(all_axes=True)

    # ── Accessors ────────────────────────────────────────────────────

    @property
    def fig(self) -> Figure:
        return self._fig

    def axes_for(self, axis: Axis):
        """The matplotlib Axes that carries *axis*."""
        if axis is Axis.SECONDARY:
            return self._ax2
        return self._ax

    def series_data(self, index: int) -> Tuple[List[float], List[float]]:
        series = self._series[index]
        return series.xs, series.ys

    @property
    def series_names(self) -> List[str]:
        return [s.field.name for s in self._series]

    def _all_axes(self):
        return [ax for ax in (self._ax, self._ax2) if ax is not None]

    # ── Limits ───────────────────────────────────────────────────────

    def set_auto_scale(self, axis: Axis, enabled: bool) -> None:
        """Record whether *axis* is auto-scaled (restart resets only those)."""
        self._auto_scaled[axis] = enabled

    def _reset_limits(self, all_axes: bool = False) -> None:
        for axis in Axis:
            if all_axes or self._auto_scaled[axis]:
                self._set_limits(axis, *EMPTY_AXIS_RANGE)

    def _set_limits(self, axis: Axis, lower: float, upper: float) -> None:
        if axis is Axis.X:
            self._ax.set_xlim(lower, upper)
            return
        target = self.axes_for(axis)
        if target is not None:
            target.set_ylim(lower, upper)

    # ── DisplayAdapter ───────────────────────────────────────────────

    def on_fields_established(self, fields: Sequence[Field]) -> None:
        for series in self._series:
            series.line.remove()
        self._series = []
        for index, field in enumerate(fields):
            target = self.axes_for(field.axis) or self._ax
            line, = target.plot(
                [], [], color=series_color(index), linewidth=1.2,
                label=field.name,
            )
            self._series.append(_Series(field, line))
        self._update_legend()

    def on_points_batch(self, points: Sequence[Point]) -> None:
        for point in points:
            for series, value in zip(self._series, point.values):
                series.xs.append(point.x)
                series.ys.append(value)
        for series in self._series:
            series.line.set_data(series.xs, series.ys)

    def on_axis_bounds(self, axis: Axis, lower: float, upper: float) -> None:
        self._set_limits(axis, lower, upper)

    def on_restart(self) -> None:
        for series in self._series:
            series.clear()
        self._reset_limits()

    def _update_legend(self) -> None:
        handles = [s.line for s in self._series]
        legend = self._ax.get_legend()
        if legend is not None:
            legend.remove()
        if handles:
            self._ax.legend(
                handles, [h.get_label() for h in handles],
                loc='upper left', fontsize=7, framealpha=0.9,
            )
