"""
Auto-scale engine for TailPlot.

Keeps running extrema per axis and turns them into display bounds with
a 10 % margin on each side.  Extrema only widen within a session; NaN
and infinite values are ignored.  Lives entirely on the GUI thread.
"""

from typing import Dict, Iterable, Optional, Tuple

import numpy as np

from .constants import AUTOSCALE_MARGIN_FRACTION, DEGENERATE_MARGIN
from .data_model import Axis, AxisState

Bounds = Tuple[float, float]

# Largest finite limit an axis is given; keeps the shown span finite too
AXIS_LIMIT = float(np.finfo(np.float64).max) / 4


def margined_bounds(lower: float, upper: float) -> Bounds:
    """``[lower - m, upper + m]`` with ``m`` a tenth of the span.

    A zero span would give a zero-width axis, so it falls back to a
    tenth of the value's magnitude, or ``DEGENERATE_MARGIN`` at zero.

    >>> margined_bounds(5.0, 15.0)
    (4.0, 16.0)
    >>> margined_bounds(0.0, 0.0)
    (-1.0, 1.0)

    Bounds are clamped to ``±AXIS_LIMIT`` so values near the float
    range still give finite axis limits.
    """
    # Scale before subtracting: the raw span of huge values overflows
    margin = AUTOSCALE_MARGIN_FRACTION * upper - AUTOSCALE_MARGIN_FRACTION * lower
    if margin == 0:
        margin = AUTOSCALE_MARGIN_FRACTION * abs(lower) or DEGENERATE_MARGIN
    low = max(lower - margin, -AXIS_LIMIT)
    high = min(upper + margin, AXIS_LIMIT)
    if low >= high:
        # All data beyond the limit on one side
        edge = AXIS_LIMIT if high > 0 else -AXIS_LIMIT
        low, high = sorted((edge, edge * (1 - 2 * AUTOSCALE_MARGIN_FRACTION)))
    return low, high


class AutoScaleEngine:
    """Running min/max for the X, Y and Y2 axes."""

    def __init__(self):
        self._states: Dict[Axis, AxisState] = {axis: AxisState() for axis in Axis}

    def state(self, axis: Axis) -> AxisState:
        return self._states[axis]

    def reset(self) -> None:
        """Forget all observed values (new session)."""
        for state in self._states.values():
            state.reset()

    def observe(self, axis: Axis, values: Iterable[float]) -> bool:
        """Widen *axis* extrema with the finite *values*; ``True`` if widened."""
        data = np.fromiter(values, dtype=np.float64)
        data = data[np.isfinite(data)]
        if data.size == 0:
            return False
        state = self._states[axis]
        low = float(data.min())
        high = float(data.max())
        widened = False
        if low < state.observed_min:
            state.observed_min = low
            widened = True
        if high > state.observed_max:
            state.observed_max = high
            widened = True
        return widened

    def bounds(self, axis: Axis) -> Optional[Bounds]:
        """Display bounds for *axis*, or ``None`` if manual or empty."""
        state = self._states[axis]
        if not state.auto_scale or not state.has_data:
            return None
        return margined_bounds(state.observed_min, state.observed_max)

    def update(self, axis: Axis, values: Iterable[float]) -> Optional[Bounds]:
        """Observe *values*; return new bounds if they changed, else ``None``."""
        if not self.observe(axis, values):
            return None
        return self.bounds(axis)

    def set_auto_scale(self, axis: Axis, enabled: bool) -> Optional[Bounds]:
        """Toggle auto-scale; returns the bounds to apply when enabling."""
        state = self._states[axis]
        state.auto_scale = enabled
        return self.bounds(axis) if enabled else None
