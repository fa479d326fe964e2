"""
Display side of the TailPlot pipeline.

``DisplayAdapter`` is the interface a chart implements to receive data;
``ChartFeed`` sits between the point buffer and the adapter, on the GUI
thread.  For every flushed batch it forwards field announcements,
restarts and point runs in order, keeps the auto-scale extrema current,
and reports each axis whose bounds moved exactly once per flush.
"""

from typing import Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from .autoscale import AutoScaleEngine
from .data_model import Axis, Field, Point
from .point_buffer import BufferItem, FieldsEstablished, SessionRestart


class DisplayAdapter:
    """Receiver of finished data.  All calls arrive on the GUI thread.

    The default implementations do nothing, so adapters only override
    what they draw.
    """

    def on_fields_established(self, fields: Sequence[Field]) -> None:
        """The field set of the current session is known."""

    def on_points_batch(self, points: Sequence[Point]) -> None:
        """New points, in arrival order; values may contain NaN gaps."""

    def on_axis_bounds(self, axis: Axis, lower: float, upper: float) -> None:
        """Auto-scaled bounds of *axis* changed."""

    def on_restart(self) -> None:
        """A new session began; clear every series."""


class ChartFeed:
    """Applies flushed buffer batches to a ``DisplayAdapter``.

    Parameters
    ----------
    adapter : DisplayAdapter
    engine : AutoScaleEngine, optional
        Shared with the GUI for the auto-scale toggles.
    """

    def __init__(self, adapter: DisplayAdapter, engine: Optional[AutoScaleEngine] = None):
        self._adapter = adapter
        self.engine = engine if engine is not None else AutoScaleEngine()
        self._fields: Tuple[Field, ...] = ()
        self.points = 0

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    def deliver(self, items: Iterable[BufferItem]) -> None:
        """Apply one flushed batch.  Used as the ``PointBuffer`` consumer."""
        changed: Set[Axis] = set()
        run: List[Point] = []
        for item in items:
            if isinstance(item, Point):
                run.append(item)
                continue
            self._apply_points(run, changed)
            run = []
            if isinstance(item, SessionRestart):
                self.engine.reset()
                self._fields = ()
                self.points = 0
                changed.clear()
                self._adapter.on_restart()
            elif isinstance(item, FieldsEstablished):
                self._fields = item.fields
                self._adapter.on_fields_established(item.fields)
        self._apply_points(run, changed)

        for axis in Axis:
            if axis in changed:
                bounds = self.engine.bounds(axis)
                if bounds is not None:
                    self._adapter.on_axis_bounds(axis, *bounds)

    def _apply_points(self, run: List[Point], changed: Set[Axis]) -> None:
        if not run:
            return
        self._adapter.on_points_batch(run)
        self.points += len(run)

        if self.engine.observe(Axis.X, (p.x for p in run)):
            changed.add(Axis.X)

        n_fields = len(self._fields)
        if n_fields == 0:
            return
        values = np.array([p.values for p in run], dtype=np.float64).reshape(len(run), n_fields)
        for axis in (Axis.PRIMARY, Axis.SECONDARY):
            columns = [i for i, f in enumerate(self._fields) if f.axis is axis]
            if columns and self.engine.observe(axis, values[:, columns].ravel()):
                changed.add(axis)

    def set_auto_scale(self, axis: Axis, enabled: bool) -> None:
        """Toggle auto-scale for *axis*, re-applying bounds when enabled."""
        bounds = self.engine.set_auto_scale(axis, enabled)
        if bounds is not None:
            self._adapter.on_axis_bounds(axis, *bounds)
