"""
Line parser for TailPlot.

Turns one raw line into a ``Point``, a ``Skip`` (blank, comment, or
header line) or a ``LineError`` (too few columns).  Handles:

- Regex field splitting (default: runs of comma, tab, or space)
- One-time field/selection inference on the first line of a session
- Header lines, consumed again on every pass over the file
- X from an explicit column or from the running point index
- Per-value parse failures mapped to ``NaN`` without dropping the line

Diagnostics are emitted as ``ParseWarning`` through ``warnings``.
"""

import enum
import math
import warnings
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .config import TailPlotConfig
from .constants import COMMENT_MARKER
from .data_model import Axis, Field, LineError, ParseWarning, Point, Skip

ParseResult = Union[Point, Skip, LineError]


class FieldState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ESTABLISHED = "established"


class LineParser:
    """Parse lines of one source, one session at a time.

    Parameters
    ----------
    config : TailPlotConfig
    on_fields_established : callable, optional
        Called with the tuple of ``Field`` once per session, when the
        first non-comment line has been seen.
    """

    def __init__(
        self,
        config: TailPlotConfig,
        on_fields_established: Optional[Callable[[Tuple[Field, ...]], None]] = None,
    ):
        self._config = config
        self._on_fields_established = on_fields_established
        self._pinned_selection = config.pinned_selection()
        self._selection: Optional[Tuple[int, ...]] = self._pinned_selection
        self._fields: Optional[Tuple[Field, ...]] = None
        self._min_field_count = 0
        self.state = FieldState.UNINITIALIZED
        self.points = 0
        self.problems = 0

    # ── Session lifecycle ────────────────────────────────────────────

    @property
    def fields(self) -> Optional[Tuple[Field, ...]]:
        return self._fields

    @property
    def selection(self) -> Optional[Tuple[int, ...]]:
        return self._selection

    def reset_session(self) -> None:
        """Start a new pass over the source.

        Inferred names and selection are dropped when the config asks
        for re-inference; explicit ones always survive.
        """
        self.state = FieldState.UNINITIALIZED
        self.points = 0
        self.problems = 0
        if self._config.reinfer_on_restart:
            self._selection = self._pinned_selection
            if self._config.field_names is None:
                self._fields = None

    def _establish(self, columns: Sequence[str]) -> None:
        config = self._config
        if self._selection is None:
            self._selection = config.default_selection(len(columns))
        selection = self._selection

        if self._fields is None:
            secondary = config.secondary_positions(selection)
            fields: List[Field] = []
            for pos, column in enumerate(selection):
                if config.field_names is not None:
                    name = config.field_names[pos]
                elif config.header_line and column <= len(columns):
                    name = columns[column - 1]
                else:
                    name = f"Column {pos + 1}"
                on_y2 = pos in secondary
                if config.uses_y2:
                    name += " (Y2)" if on_y2 else " (Y1)"
                fields.append(Field(
                    name=name,
                    axis=Axis.SECONDARY if on_y2 else Axis.PRIMARY,
                    parser=config.field_format(column),
                ))
            self._fields = tuple(fields)

        self._min_field_count = config.min_field_count(selection)
        self.state = FieldState.ESTABLISHED
        if self._on_fields_established is not None:
            self._on_fields_established(self._fields)

    # ── Parsing ──────────────────────────────────────────────────────

    def _report(self, message: str) -> None:
        self.problems += 1
        warnings.warn(message, ParseWarning, stacklevel=3)

    def parse(self, raw_line: str, line_number: int) -> ParseResult:
        """Parse *raw_line* (1-based *line_number* within the session)."""
        trimmed = raw_line.strip()
        if not trimmed or trimmed.startswith(COMMENT_MARKER):
            return Skip(line_number)

        columns = self._config.field_separator.split(trimmed)

        if self.state is FieldState.UNINITIALIZED:
            self._establish(columns)
            if self._config.header_line:
                return Skip(line_number)

        if len(columns) < self._min_field_count:
            message = (
                f"Expected at least {self._min_field_count} fields, but saw "
                f"{len(columns)} on line {line_number}"
            )
            self._report(message)
            return LineError(line_number, message)

        x_column = self._config.x_column
        if x_column is None:
            x = float(self.points)
        else:
            x_text = columns[x_column - 1]
            try:
                x = self._config.field_format(x_column).parse(x_text)
            except ValueError:
                self._report(f"Invalid X value on line {line_number}: {x_text}")
                x = math.nan

        values: List[float] = []
        for field, column in zip(self._fields, self._selection):
            text = columns[column - 1]
            try:
                values.append(field.parser.parse(text))
            except ValueError:
                self._report(
                    f"Invalid value on line {line_number} for "
                    f"\"{field.name}\": {text}"
                )
                values.append(math.nan)

        self.points += 1
        return Point(x=x, values=tuple(values))
