import datetime
import io
import math

import pytest
from matplotlib.figure import Figure

from tailplot.chart_live import LiveChart
from tailplot.config import TailPlotConfig
from tailplot.constants import series_color
from tailplot.data_model import Axis, Field, Point
from tailplot.formats import DateFormat, NumericFormat
from tailplot.pipeline import build_pipeline
from tailplot.tail_reader import TailReader

FIELDS = (
    Field("temp (Y1)", Axis.PRIMARY, NumericFormat()),
    Field("load (Y2)", Axis.SECONDARY, NumericFormat()),
)


@pytest.fixture
def chart():
    return LiveChart(Figure(), title="data.log", use_y2=True)


def test_starts_with_unit_axes(chart):
    assert chart.axes_for(Axis.X).get_xlim() == (0.0, 1.0)
    assert chart.axes_for(Axis.PRIMARY).get_ylim() == (0.0, 1.0)
    assert chart.axes_for(Axis.SECONDARY).get_ylim() == (0.0, 1.0)


def test_fields_become_coloured_lines_on_their_axes(chart):
    chart.on_fields_established(FIELDS)
    assert chart.series_names == ["temp (Y1)", "load (Y2)"]
    primary_lines = chart.axes_for(Axis.PRIMARY).get_lines()
    secondary_lines = chart.axes_for(Axis.SECONDARY).get_lines()
    assert [line.get_label() for line in primary_lines] == ["temp (Y1)"]
    assert [line.get_label() for line in secondary_lines] == ["load (Y2)"]
    assert primary_lines[0].get_color() == series_color(0)
    assert secondary_lines[0].get_color() == series_color(1)
    legend = chart.axes_for(Axis.PRIMARY).get_legend()
    assert [t.get_text() for t in legend.get_texts()] == ["temp (Y1)", "load (Y2)"]


def test_batches_extend_every_series(chart):
    chart.on_fields_established(FIELDS)
    chart.on_points_batch([Point(0.0, (1.0, 2.0)), Point(1.0, (math.nan, 4.0))])
    chart.on_points_batch([Point(2.0, (5.0, 6.0))])
    xs, ys = chart.series_data(0)
    assert xs == [0.0, 1.0, 2.0]
    assert ys[0] == 1.0 and math.isnan(ys[1]) and ys[2] == 5.0
    assert chart.series_data(1) == ([0.0, 1.0, 2.0], [2.0, 4.0, 6.0])


def test_axis_bounds_are_applied(chart):
    chart.on_axis_bounds(Axis.X, -0.2, 2.2)
    chart.on_axis_bounds(Axis.PRIMARY, 4.0, 16.0)
    chart.on_axis_bounds(Axis.SECONDARY, -1.0, 1.0)
    assert chart.axes_for(Axis.X).get_xlim() == pytest.approx((-0.2, 2.2))
    assert chart.axes_for(Axis.PRIMARY).get_ylim() == (4.0, 16.0)
    assert chart.axes_for(Axis.SECONDARY).get_ylim() == (-1.0, 1.0)


def test_restart_clears_series_and_resets_auto_scaled_axes(chart):
    chart.on_fields_established(FIELDS)
    chart.on_points_batch([Point(0.0, (1.0, 2.0))])
    chart.set_auto_scale(Axis.PRIMARY, False)
    chart.on_axis_bounds(Axis.X, 5.0, 9.0)
    chart.on_axis_bounds(Axis.PRIMARY, 5.0, 9.0)

    chart.on_restart()

    assert chart.series_data(0) == ([], [])
    assert chart.series_data(1) == ([], [])
    assert chart.axes_for(Axis.X).get_xlim() == (0.0, 1.0)
    # Manually scaled axis keeps its range
    assert chart.axes_for(Axis.PRIMARY).get_ylim() == (5.0, 9.0)


def test_new_field_set_replaces_old_lines(chart):
    chart.on_fields_established(FIELDS)
    chart.on_fields_established(FIELDS[:1])
    assert chart.series_names == ["temp (Y1)"]
    assert len(chart.axes_for(Axis.PRIMARY).get_lines()) == 1
    assert len(chart.axes_for(Axis.SECONDARY).get_lines()) == 0


def test_without_y2_secondary_fields_share_the_primary_axis():
    chart = LiveChart(Figure())
    assert chart.axes_for(Axis.SECONDARY) is None
    chart.on_fields_established(FIELDS)
    assert len(chart.axes_for(Axis.PRIMARY).get_lines()) == 2


def test_axis_formats_drive_tick_labels():
    fmt = DateFormat("%Y-%m-%d")
    chart = LiveChart(Figure(), x_format=fmt, y_format=NumericFormat(".1f"))
    stamp = datetime.datetime(2024, 5, 6).timestamp()
    assert chart.axes_for(Axis.X).xaxis.get_major_formatter()(stamp) == "2024-05-06"
    assert chart.axes_for(Axis.PRIMARY).yaxis.get_major_formatter()(2.25) == "2.2"


def test_values_near_the_float_range_get_finite_limits():
    chart = LiveChart(Figure())
    scheduled = []
    producer, _, _ = build_pipeline(
        TailPlotConfig(), chart, scheduled.append,
        reader=TailReader(stream=io.StringIO("1.7e308\n-1.7e308\n")),
    )
    producer.run()
    for callback in scheduled:
        callback()

    low, high = chart.axes_for(Axis.PRIMARY).get_ylim()
    assert math.isfinite(low) and math.isfinite(high)
    assert low < high
    assert chart.series_data(0) == ([0.0, 1.0], [1.7e308, -1.7e308])
