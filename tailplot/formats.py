"""
Field formats for TailPlot.

A format converts column text to a float for plotting and, when used as
an axis display format, renders tick values back to text.  Two kinds:

- ``NumericFormat``: locale-tolerant number parsing, or a Python
  format spec (``",.2f"``, ``".1%"``) that also drives tick labels
- ``DateFormat``: ISO 8601 or ``strptime`` pattern; dates become POSIX
  timestamps in seconds

Format specs on the command line follow the grammar
``number`` | ``number,<format spec>`` | ``date`` | ``date,<strftime pattern>``.
"""

import datetime
import math
from typing import Optional

from .constants import DEFAULT_DATE_DISPLAY


# ── Locale-safe float parsing ────────────────────────────────────────────

def _locale_float(text: str) -> float:
    """Parse a numeric string that may use comma as decimal separator.

    Handles:
    - Standard period decimals: ``"3.14"``
    - European comma decimals: ``"3,14"``
    - Thousand separators: ``"1,234.56"`` and ``"1.234,56"``

    Raises ``ValueError`` for genuinely non-numeric strings.
    """
    s = text.strip()
    if not s:
        raise ValueError("empty string")
    # If both '.' and ',' are present, the last one is the decimal
    if ',' in s and '.' in s:
        if s.rfind(',') > s.rfind('.'):
            s = s.replace('.', '').replace(',', '.')
        else:
            s = s.replace(',', '')
    elif ',' in s:
        s = s.replace(',', '.')
    result = float(s)
    if not math.isfinite(result):
        raise ValueError(f"non-finite value: {text.strip()!r}")
    return result


class FieldFormat:
    """Base class: ``parse`` text to float, ``format`` float to text."""

    spec = ""

    def parse(self, text: str) -> float:
        raise NotImplementedError

    def format(self, value: float) -> str:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.spec!r})"

    def __eq__(self, other):
        return type(self) is type(other) and self.spec == other.spec

    def __hash__(self):
        return hash((type(self).__name__, self.spec))


class NumericFormat(FieldFormat):
    """Plain number, optionally with a Python format spec.

    With a spec, grouping characters (``,`` / ``_``) it declares are
    stripped before parsing, and a trailing ``%`` divides by 100.
    """

    def __init__(self, pattern: Optional[str] = None):
        if pattern is not None:
            # Reject bad specs up front rather than on the first tick
            format(0.0, pattern)
        self.pattern = pattern
        self.spec = "number" if pattern is None else f"number,{pattern}"

    def parse(self, text: str) -> float:
        if self.pattern is None:
            return _locale_float(text)
        s = text.strip()
        if ',' in self.pattern:
            s = s.replace(',', '')
        if '_' in self.pattern:
            s = s.replace('_', '')
        scale = 1.0
        if self.pattern.endswith('%') and s.endswith('%'):
            s = s[:-1]
            scale = 0.01
        result = float(s) * scale
        if not math.isfinite(result):
            raise ValueError(f"non-finite value: {text.strip()!r}")
        return result

    def format(self, value: float) -> str:
        if not math.isfinite(value):
            return ""
        if self.pattern is None:
            return f"{value:g}"
        return format(value, self.pattern)


class DateFormat(FieldFormat):
    """Date/time parsed to a POSIX timestamp (seconds).

    Without a pattern, ISO 8601 text is accepted.  Naive date/times are
    interpreted in local time.
    """

    def __init__(self, pattern: Optional[str] = None):
        self.pattern = pattern
        self.spec = "date" if pattern is None else f"date,{pattern}"

    def parse(self, text: str) -> float:
        s = text.strip()
        if self.pattern is None:
            stamp = datetime.datetime.fromisoformat(s)
        else:
            stamp = datetime.datetime.strptime(s, self.pattern)
        try:
            return stamp.timestamp()
        except (OverflowError, OSError) as exc:
            raise ValueError(f"date out of range: {s!r}") from exc

    def format(self, value: float) -> str:
        if not math.isfinite(value):
            return ""
        try:
            stamp = datetime.datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError):
            return f"{value:g}"
        return stamp.strftime(self.pattern or DEFAULT_DATE_DISPLAY)


def parse_format_spec(spec: str) -> FieldFormat:
    """Build a ``FieldFormat`` from ``number[,<spec>]`` / ``date[,<pattern>]``.

    Raises ``ValueError`` for anything else.

    >>> parse_format_spec("number")
    NumericFormat('number')
    >>> parse_format_spec("date,%H:%M:%S")
    DateFormat('date,%H:%M:%S')
    """
    if spec == "number":
        return NumericFormat()
    if spec.startswith("number,"):
        pattern = spec[len("number,"):]
        try:
            return NumericFormat(pattern)
        except ValueError as exc:
            raise ValueError(f"Invalid number format {pattern!r}: {exc}") from exc
    if spec == "date":
        return DateFormat()
    if spec.startswith("date,"):
        return DateFormat(spec[len("date,"):])
    raise ValueError(f"Unrecognized number format: {spec}")
