import math

import pytest

from tailplot.autoscale import AXIS_LIMIT, AutoScaleEngine, margined_bounds
from tailplot.data_model import Axis


def test_margin_is_a_tenth_of_the_span():
    assert margined_bounds(5.0, 15.0) == (4.0, 16.0)


def test_zero_span_still_gives_a_visible_axis():
    lower, upper = margined_bounds(3.0, 3.0)
    assert lower < 3.0 < upper
    assert margined_bounds(0.0, 0.0) == (-1.0, 1.0)


def test_update_reports_new_bounds_only_when_extrema_widen():
    engine = AutoScaleEngine()
    assert engine.update(Axis.PRIMARY, [10.0, 15.0, 5.0]) == (4.0, 16.0)
    assert engine.update(Axis.PRIMARY, [7.0]) is None
    assert engine.update(Axis.PRIMARY, [20.0]) == pytest.approx((3.5, 21.5))
    state = engine.state(Axis.PRIMARY)
    assert (state.observed_min, state.observed_max) == (5.0, 20.0)


def test_non_finite_values_are_ignored():
    engine = AutoScaleEngine()
    assert engine.update(Axis.X, [math.nan, math.inf, -math.inf]) is None
    assert not engine.state(Axis.X).has_data
    assert engine.update(Axis.X, [math.nan, 2.0]) == pytest.approx((1.8, 2.2))


def test_axes_are_independent():
    engine = AutoScaleEngine()
    engine.update(Axis.PRIMARY, [1.0, 2.0])
    assert engine.bounds(Axis.SECONDARY) is None
    assert engine.bounds(Axis.X) is None


def test_manual_axis_keeps_tracking_but_reports_nothing():
    engine = AutoScaleEngine()
    assert engine.set_auto_scale(Axis.PRIMARY, False) is None
    assert engine.update(Axis.PRIMARY, [0.0, 10.0]) is None
    assert engine.bounds(Axis.PRIMARY) is None
    assert engine.set_auto_scale(Axis.PRIMARY, True) == (-1.0, 11.0)


def test_reset_restores_sentinels():
    engine = AutoScaleEngine()
    engine.update(Axis.X, [1.0, 2.0])
    engine.update(Axis.SECONDARY, [3.0])
    engine.reset()
    for axis in Axis:
        state = engine.state(axis)
        assert state.observed_min == math.inf
        assert state.observed_max == -math.inf
        assert engine.bounds(axis) is None


@pytest.mark.parametrize("lower, upper", [
    (-1e308, 1e308),
    (0.0, 1.7e308),
    (1.7e308, 1.7e308),
    (-1.7e308, -1.7e308),
])
def test_bounds_near_the_float_range_stay_finite(lower, upper):
    low, high = margined_bounds(lower, upper)
    assert math.isfinite(low) and math.isfinite(high)
    assert math.isfinite(high - low)
    assert low < high
    assert -AXIS_LIMIT <= low and high <= AXIS_LIMIT


def test_huge_values_give_finite_engine_bounds():
    engine = AutoScaleEngine()
    low, high = engine.update(Axis.PRIMARY, [-1e308, 1e308])
    assert (low, high) == (-AXIS_LIMIT, AXIS_LIMIT)
