"""
Command line for TailPlot.

Turns ``argv`` into a validated ``TailPlotConfig``.  Any configuration
problem is reported through ``ArgumentParser.error`` (usage on stderr
and exit status 2) before the window opens or the source is read.
"""

import argparse
from typing import Optional, Sequence, Tuple

from . import APP_NAME, APP_VERSION
from .config import ConfigError, TailPlotConfig, compile_separator
from .constants import DEFAULT_FIELD_SEPARATOR, POLL_INTERVAL_S
from .formats import parse_format_spec

_EPILOG = """\
formats:
  number              locale-tolerant number (default)
  number,SPEC         Python format spec, e.g. number,,.2f
  date                ISO 8601 date/time
  date,PATTERN        strptime pattern, e.g. date,%Y-%m-%d_%H:%M:%S

notes:
  If both --fields and --header-line are given, the header line is
  skipped and field names are taken from --fields.

examples:
  plot the first and third fields, with the third on the Y2 axis
    tailplot --select=1,3 --y2=3 file
"""


def _int_list(text: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part.strip()) for part in text.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected a comma-separated list of integers, got {text!r}")


def _field_format(text: str):
    """``FIELD,FMT`` → ``(column, FieldFormat)``."""
    column, sep, spec = text.partition(',')
    if not sep:
        raise argparse.ArgumentTypeError(
            f"expected FIELD,FORMAT, got {text!r}")
    try:
        return int(column), parse_format_spec(spec)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def _axis_format(text: str):
    try:
        return parse_format_spec(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tailplot",
        usage="%(prog)s [OPTION]... [FILE]",
        description=(
            "Plots a file, displaying new data as it is generated "
            "(analogous to 'tail -f'). If no file is specified, standard "
            "input is read."
        ),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("file", nargs="?", default=None, metavar="FILE")
    parser.add_argument(
        "-F", "--field-separator", default=DEFAULT_FIELD_SEPARATOR,
        metavar="REGEX",
        help="field separator regex (default: %(default)s)")
    parser.add_argument(
        "-f", "--fields", metavar="FIELDS",
        help="field names, separated by the field separator")
    parser.add_argument(
        "-s", "--select", type=_int_list, metavar="FIELDS",
        help="comma-separated list of field indices to plot (1-based)")
    parser.add_argument(
        "--y2", type=_int_list, metavar="FIELDS",
        help="comma-separated list of field indices to place on the Y2 "
             "axis (1-based)")
    parser.add_argument(
        "-x", "--x", type=int, dest="x_column", metavar="INDEX",
        help="index of the field to use as X value (1-based, default: "
             "point index)")
    parser.add_argument(
        "--field-format", type=_field_format, action="append", default=[],
        metavar="FIELD,FMT",
        help="input format of a field, e.g. 1,date,%%Y-%%m-%%d_%%H:%%M:%%S")
    parser.add_argument(
        "--x-format", type=_axis_format, metavar="FMT",
        help="display format of the X axis")
    parser.add_argument(
        "--y-format", type=_axis_format, metavar="FMT",
        help="display format of the Y axis")
    parser.add_argument(
        "--y2-format", type=_axis_format, metavar="FMT",
        help="display format of the Y2 axis")
    parser.add_argument(
        "-h", "--header-line", action="store_true",
        help="use the first line as a header line")
    parser.add_argument(
        "-t", "--title", metavar="TITLE",
        help="window title (defaults to the file name)")
    parser.add_argument(
        "--poll-interval", type=float, default=POLL_INTERVAL_S,
        metavar="SECONDS",
        help="wait between checks for new data (default: %(default)s)")
    parser.add_argument(
        "--keep-inferred-fields", action="store_true",
        help="keep field names and selection inferred from the first line "
             "when the file restarts")
    parser.add_argument(
        "--no-auto-restart", action="store_true",
        help="do not restart automatically when the file shrinks")
    parser.add_argument(
        "--version", action="version",
        version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument(
        "--help", action="help", help="display this message")
    return parser


def config_from_args(args: argparse.Namespace) -> TailPlotConfig:
    """Build the config from parsed arguments; raises ``ConfigError``."""
    separator = compile_separator(args.field_separator)
    field_names = None
    if args.fields is not None:
        field_names = tuple(
            name for name in separator.split(args.fields) if name)
        if not field_names:
            raise ConfigError("--fields did not contain any names")
    return TailPlotConfig(
        path=args.file,
        field_separator=separator,
        field_names=field_names,
        selection=args.select,
        y2=args.y2,
        x_column=args.x_column,
        field_formats=dict(args.field_format),
        x_format=args.x_format,
        y_format=args.y_format,
        y2_format=args.y2_format,
        header_line=args.header_line,
        title=args.title,
        poll_interval=args.poll_interval,
        reinfer_on_restart=not args.keep_inferred_fields,
        auto_restart=not args.no_auto_restart,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> TailPlotConfig:
    """Parse *argv* into a ``TailPlotConfig``, exiting on bad input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return config_from_args(args)
    except ConfigError as exc:
        parser.error(str(exc))
