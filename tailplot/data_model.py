"""
Data model for TailPlot.

Immutable dataclasses for the values that flow from the line parser
through the point buffer to the chart.  ``Field`` and ``Point`` are
created on the producer thread and handed to the GUI thread read-only.

Unparseable values are modelled as ``NaN`` (not ``None``) so a point
always carries one float per field; the chart draws them as gaps.
"""

import enum
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .formats import FieldFormat


class Axis(enum.Enum):
    """The three chart axes a value can be routed to."""
    X = "x"
    PRIMARY = "y"
    SECONDARY = "y2"


class ParseWarning(UserWarning):
    """Diagnostic for a skipped line or an unparseable value."""


@dataclass(frozen=True)
class Field:
    """One plotted column.

    Parameters
    ----------
    name : str
        Display name (legend label).
    axis : Axis
        ``Axis.PRIMARY`` or ``Axis.SECONDARY``.
    parser : FieldFormat
        Converts the column text to a float (see ``formats``).
    """
    name: str
    axis: Axis
    parser: "FieldFormat"


@dataclass(frozen=True)
class Point:
    """One ingested data line: the X value and one value per field."""
    x: float
    values: Tuple[float, ...]


@dataclass(frozen=True)
class Skip:
    """Blank, comment, or header line; nothing to plot."""
    line_number: int


@dataclass(frozen=True)
class LineError:
    """Structurally invalid line (e.g. too few columns); not plotted."""
    line_number: int
    message: str


@dataclass
class AxisState:
    """Running extrema for one axis within a session.

    ``observed_min`` / ``observed_max`` start at +inf / -inf and are only
    ever widened until the session is reset.
    """
    observed_min: float = math.inf
    observed_max: float = -math.inf
    auto_scale: bool = True

    @property
    def has_data(self) -> bool:
        return self.observed_min <= self.observed_max

    def reset(self) -> None:
        self.observed_min = math.inf
        self.observed_max = -math.inf
