import datetime
import math
import typing

import pytest

from tailplot.data_model import Field
from tailplot.formats import DateFormat, FieldFormat, NumericFormat, parse_format_spec


def test_default_number_accepts_period_and_comma_decimals():
    fmt = NumericFormat()
    assert fmt.parse("3.14") == 3.14
    assert fmt.parse("3,14") == 3.14
    assert fmt.parse(" 1,234.5 ") == 1234.5
    assert fmt.parse("1.234,5") == 1234.5


@pytest.mark.parametrize("text", ["abc", "", "nan", "inf", "1.2.3x"])
def test_default_number_rejects_garbage(text):
    with pytest.raises(ValueError):
        NumericFormat().parse(text)


def test_number_pattern_strips_grouping_and_formats_ticks():
    fmt = NumericFormat(",.2f")
    assert fmt.parse("1,234.50") == 1234.5
    assert fmt.format(1234.5) == "1,234.50"
    assert fmt.spec == "number,,.2f"


def test_number_percent_pattern():
    fmt = NumericFormat(".1%")
    assert fmt.parse("12.5%") == pytest.approx(0.125)
    assert fmt.format(0.125) == "12.5%"


def test_invalid_number_pattern_is_rejected_up_front():
    with pytest.raises(ValueError):
        NumericFormat("zz")


def test_date_pattern_parses_to_posix_seconds():
    fmt = DateFormat("%Y-%m-%d %H:%M:%S")
    expected = datetime.datetime(2024, 1, 2, 3, 4, 5).timestamp()
    assert fmt.parse("2024-01-02 03:04:05") == expected


def test_default_date_is_iso8601():
    expected = datetime.datetime(2024, 1, 2, 3, 4, 5).timestamp()
    assert DateFormat().parse("2024-01-02T03:04:05") == expected


def test_date_mismatch_raises_value_error():
    with pytest.raises(ValueError):
        DateFormat("%H:%M").parse("nope")


def test_date_format_renders_ticks():
    fmt = DateFormat("%Y-%m-%d")
    assert fmt.format(datetime.datetime(2024, 5, 6).timestamp()) == "2024-05-06"


def test_non_finite_ticks_render_empty():
    assert NumericFormat().format(math.nan) == ""
    assert DateFormat().format(math.inf) == ""


def test_parse_format_spec_grammar():
    assert parse_format_spec("number") == NumericFormat()
    assert parse_format_spec("number,.3f") == NumericFormat(".3f")
    assert parse_format_spec("date") == DateFormat()
    date = parse_format_spec("date,%H:%M,%S")
    assert isinstance(date, DateFormat)
    assert date.pattern == "%H:%M,%S"


@pytest.mark.parametrize("spec", ["bogus", "time", "number,zz", ""])
def test_parse_format_spec_rejects_unknown(spec):
    with pytest.raises(ValueError):
        parse_format_spec(spec)


def test_field_parser_is_annotated_as_a_field_format():
    hints = typing.get_type_hints(Field, localns={"FieldFormat": FieldFormat})
    assert hints["parser"] is FieldFormat
