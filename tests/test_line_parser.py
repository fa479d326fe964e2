import math
import re

import pytest

from tailplot.config import TailPlotConfig
from tailplot.data_model import Axis, LineError, ParseWarning, Point, Skip
from tailplot.formats import DateFormat
from tailplot.line_parser import FieldState, LineParser


def _parser(**kwargs):
    announced = []
    parser = LineParser(TailPlotConfig(**kwargs), on_fields_established=announced.append)
    return parser, announced


def test_index_x_and_selected_column():
    parser, _ = _parser(field_separator=re.compile(","), selection=(2,))
    results = [parser.parse(line, n) for n, line in enumerate(["1,10", "2,15", "3,5"], 1)]
    assert results == [
        Point(0.0, (10.0,)),
        Point(1.0, (15.0,)),
        Point(2.0, (5.0,)),
    ]


def test_default_selection_is_every_column():
    parser, announced = _parser()
    assert parser.parse("1,10", 1) == Point(0.0, (1.0, 10.0))
    assert parser.selection == (1, 2)
    assert [f.name for f in announced[0]] == ["Column 1", "Column 2"]
    assert all(f.axis is Axis.PRIMARY for f in announced[0])


def test_blank_and_comment_lines_are_skipped_without_consuming_an_index():
    parser, announced = _parser()
    assert parser.parse("", 1) == Skip(1)
    assert parser.parse("   ", 2) == Skip(2)
    assert parser.parse("  # comment", 3) == Skip(3)
    assert parser.state is FieldState.UNINITIALIZED
    assert announced == []
    assert parser.parse("7 8", 4) == Point(0.0, (7.0, 8.0))


def test_unparseable_value_becomes_nan_and_point_is_kept():
    parser, _ = _parser()
    with pytest.warns(ParseWarning, match='line 1 for "Column 1": a'):
        point = parser.parse("a,10", 1)
    assert math.isnan(point.values[0])
    assert point.values[1] == 10.0
    assert point.x == 0.0
    assert parser.problems == 1


def test_too_few_columns_is_a_line_error():
    parser, _ = _parser(selection=(1, 3))
    assert parser.parse("1,2,3", 1) == Point(0.0, (1.0, 3.0))
    with pytest.warns(ParseWarning, match="Expected at least 3 fields, but saw 2 on line 2"):
        result = parser.parse("1,2", 2)
    assert isinstance(result, LineError)
    assert result.line_number == 2
    # The failed line did not consume a point index
    assert parser.parse("4,5,6", 3) == Point(1.0, (4.0, 6.0))


def test_explicit_x_column_is_excluded_from_default_selection():
    parser, announced = _parser(x_column=1)
    assert parser.parse("5,10,20", 1) == Point(5.0, (10.0, 20.0))
    assert parser.selection == (2, 3)
    assert len(announced[0]) == 2


def test_invalid_x_value_becomes_nan():
    parser, _ = _parser(x_column=1)
    parser.parse("1,2,3", 1)
    with pytest.warns(ParseWarning, match="Invalid X value on line 2: bad"):
        point = parser.parse("bad,2,3", 2)
    assert math.isnan(point.x)
    assert point.values == (2.0, 3.0)


def test_x_column_uses_its_field_format():
    fmt = DateFormat("%Y-%m-%d_%H:%M")
    parser, _ = _parser(x_column=1, field_formats={1: fmt})
    point = parser.parse("2024-03-01_12:30 42", 1)
    assert point.x == fmt.parse("2024-03-01_12:30")
    assert point.values == (42.0,)


def test_header_line_names_fields_and_is_not_a_point():
    parser, announced = _parser(header_line=True)
    assert parser.parse("time value", 1) == Skip(1)
    assert [f.name for f in announced[0]] == ["time", "value"]
    assert parser.parse("1 2", 2) == Point(0.0, (1.0, 2.0))


def test_explicit_fields_override_header():
    parser, announced = _parser(header_line=True, field_names=("a", "b"))
    assert parser.parse("time value", 1) == Skip(1)
    assert [f.name for f in announced[0]] == ["a", "b"]


def test_y2_fields_are_labelled_and_routed():
    parser, announced = _parser(selection=(1, 2), y2=(2,))
    parser.parse("1 2", 1)
    fields = announced[0]
    assert [f.name for f in fields] == ["Column 1 (Y1)", "Column 2 (Y2)"]
    assert [f.axis for f in fields] == [Axis.PRIMARY, Axis.SECONDARY]


def test_restart_reinfers_selection_by_default():
    parser, announced = _parser()
    parser.parse("1 2 3", 1)
    parser.parse("4 5 6", 2)
    parser.reset_session()
    assert parser.state is FieldState.UNINITIALIZED
    assert parser.parse("7 8", 1) == Point(0.0, (7.0, 8.0))
    assert parser.selection == (1, 2)
    assert [len(fields) for fields in announced] == [3, 2]


def test_restart_can_keep_inferred_selection():
    parser, announced = _parser(reinfer_on_restart=False)
    parser.parse("1 2 3", 1)
    parser.reset_session()
    with pytest.warns(ParseWarning, match="Expected at least 3 fields"):
        assert isinstance(parser.parse("7 8", 1), LineError)
    assert parser.parse("7 8 9", 2) == Point(0.0, (7.0, 8.0, 9.0))
    assert len(announced) == 2
    assert announced[0] == announced[1]


def test_header_is_consumed_again_after_restart():
    parser, announced = _parser(header_line=True, reinfer_on_restart=False)
    parser.parse("a b", 1)
    parser.parse("1 2", 2)
    parser.reset_session()
    assert parser.parse("a b", 1) == Skip(1)
    assert parser.parse("3 4", 2) == Point(0.0, (3.0, 4.0))
    assert announced[1] == announced[0]


def test_reset_clears_problem_count():
    parser, _ = _parser()
    with pytest.warns(ParseWarning):
        parser.parse("x", 1)
    assert parser.problems == 1
    parser.reset_session()
    assert parser.problems == 0
