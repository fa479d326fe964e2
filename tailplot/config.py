"""
Session configuration for TailPlot.

``TailPlotConfig`` is built once at startup (normally by ``cli``) and is
read-only afterwards.  All cross-option consistency checks happen in
``__post_init__`` so a bad configuration fails before any ingestion.

Column indices are 1-based throughout, matching the command line.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from .constants import DEFAULT_FIELD_SEPARATOR, POLL_INTERVAL_S, STDIN_TITLE
from .formats import FieldFormat, NumericFormat


class ConfigError(ValueError):
    """Invalid or inconsistent configuration."""


def compile_separator(pattern: str) -> re.Pattern:
    """Compile a field-separator regex, raising ``ConfigError`` if invalid."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"Invalid field separator {pattern!r}: {exc}") from exc


@dataclass(frozen=True)
class TailPlotConfig:
    """Everything that shapes one TailPlot run.

    Parameters
    ----------
    path : str or None
        File to follow; ``None`` reads standard input.
    field_separator : re.Pattern
        Splits each line into columns.
    field_names : tuple of str or None
        Explicit names for the plotted fields (pins the field set).
    selection : tuple of int or None
        Columns to plot (pins the selection).
    y2 : tuple of int or None
        Columns routed to the secondary Y axis.
    x_column : int or None
        Column used as X; ``None`` uses the running point index.
    field_formats : dict
        ``{column: FieldFormat}`` input formats; numbers by default.
    x_format, y_format, y2_format : FieldFormat or None
        Axis tick label formats.
    header_line : bool
        The first non-comment line of every pass is a header.
    reinfer_on_restart : bool
        Re-derive inferred names/selection after a restart.  Explicit
        ``field_names`` / ``selection`` are always kept.
    auto_restart : bool
        Initial state of restart-on-truncation.
    """
    path: Optional[str] = None
    field_separator: re.Pattern = field(
        default_factory=lambda: re.compile(DEFAULT_FIELD_SEPARATOR))
    field_names: Optional[Tuple[str, ...]] = None
    selection: Optional[Tuple[int, ...]] = None
    y2: Optional[Tuple[int, ...]] = None
    x_column: Optional[int] = None
    field_formats: Dict[int, FieldFormat] = field(default_factory=dict)
    x_format: Optional[FieldFormat] = None
    y_format: Optional[FieldFormat] = None
    y2_format: Optional[FieldFormat] = None
    header_line: bool = False
    title: Optional[str] = None
    poll_interval: float = POLL_INTERVAL_S
    reinfer_on_restart: bool = True
    auto_restart: bool = True

    def __post_init__(self):
        for option, indices in (('--select', self.selection), ('--y2', self.y2)):
            if indices is not None:
                if not indices:
                    raise ConfigError(f"{option} requires at least one index")
                bad = [i for i in indices if i < 1]
                if bad:
                    raise ConfigError(
                        f"{option} indices are 1-based, got {bad}")
        if self.x_column is not None and self.x_column < 1:
            raise ConfigError(f"--x index is 1-based, got {self.x_column}")
        bad_formats = [i for i in self.field_formats if i < 1]
        if bad_formats:
            raise ConfigError(
                f"--field-format indices are 1-based, got {bad_formats}")
        if self.poll_interval <= 0:
            raise ConfigError(
                f"Poll interval must be positive, got {self.poll_interval}")

        if self.field_names is not None and self.selection is not None:
            if len(self.selection) != len(self.field_names):
                raise ConfigError(
                    "Number of fields selected with --select does not match "
                    "number of labels given with --fields")

        if self.y2 is not None:
            if self.selection is not None:
                missing = [i for i in self.y2 if i not in self.selection]
                if missing:
                    raise ConfigError(
                        f"Field specified in --y2 ({missing[0]}) not present "
                        f"in --select")
            elif self.x_column is not None and self.x_column in self.y2:
                raise ConfigError(
                    f"Field specified in --y2 ({self.x_column}) is the X "
                    f"column")

    # ── Derived values ───────────────────────────────────────────────

    @property
    def is_stream(self) -> bool:
        """Standard input: not restartable, end-of-input is final."""
        return self.path is None

    @property
    def display_title(self) -> str:
        if self.title:
            return self.title
        return STDIN_TITLE if self.path is None else self.path

    @property
    def uses_y2(self) -> bool:
        return self.y2 is not None

    def default_selection(self, column_count: int) -> Tuple[int, ...]:
        """All columns, or all but the X column when X is configured.

        >>> TailPlotConfig().default_selection(3)
        (1, 2, 3)
        >>> TailPlotConfig(x_column=2).default_selection(3)
        (1, 3)
        """
        return tuple(
            i for i in range(1, column_count + 1) if i != self.x_column
        )

    def pinned_selection(self) -> Optional[Tuple[int, ...]]:
        """Selection fixed by configuration alone, or ``None``.

        With ``--fields`` but no ``--select``, the first ``len(fields)``
        non-X columns are plotted.
        """
        if self.selection is not None:
            return self.selection
        if self.field_names is not None:
            n = len(self.field_names)
            count = n if self.x_column is None or self.x_column > n else n + 1
            return self.default_selection(count)
        return None

    def secondary_positions(self, selection: Tuple[int, ...]) -> FrozenSet[int]:
        """0-based positions within *selection* that go on the Y2 axis."""
        if self.y2 is None:
            return frozenset()
        return frozenset(
            pos for pos, column in enumerate(selection) if column in self.y2
        )

    def field_format(self, column: int) -> FieldFormat:
        """Input format for *column*, numeric unless configured."""
        return self.field_formats.get(column) or NumericFormat()

    def min_field_count(self, selection: Tuple[int, ...]) -> int:
        """Columns a line needs for *selection* (and the X column)."""
        needed = max(selection) if selection else 0
        if self.x_column is not None:
            needed = max(needed, self.x_column)
        return needed
