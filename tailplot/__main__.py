"""
Entry point for TailPlot.

Usage:
    python -m tailplot [OPTION]... [FILE]
    tailplot [OPTION]... [FILE]

With no FILE, standard input is plotted until end-of-input.
"""

import importlib.util
import os
import sys
import traceback
import warnings

# (import name, distribution name)
_REQUIRED = (
    ("PySide6", "PySide6"),
    ("matplotlib", "matplotlib"),
    ("numpy", "numpy"),
)


def _check_dependencies():
    """Exit with status 1 if a required package is not installed."""
    missing = [dist for module, dist in _REQUIRED
               if importlib.util.find_spec(module) is None]
    if missing:
        print(
            f"[TailPlot] Missing required packages: {', '.join(missing)}\n"
            f"Install with: pip install {' '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)


def _exception_hook(exc_type, exc_value, exc_tb):
    """Report exceptions escaping Qt slots instead of dying silently."""
    details = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    print(f"[TailPlot] Unhandled exception:\n{details}", file=sys.stderr)

    from PySide6.QtWidgets import QApplication, QMessageBox
    if QApplication.instance() is not None:
        QMessageBox.critical(
            None, "TailPlot error",
            f"{exc_type.__name__}: {exc_value}\n\n"
            f"The full traceback was printed to the console.",
        )


def _configure_warnings():
    """Print every parse diagnostic as one plain stderr line.

    ``always`` keeps the warnings registry from growing with every
    distinct line number of an endless stream.
    """
    from .data_model import ParseWarning

    warnings.simplefilter("always", ParseWarning)
    default_show = warnings.showwarning

    def _show(message, category, filename, lineno, file=None, line=None):
        if issubclass(category, ParseWarning):
            print(message, file=file or sys.stderr)
        else:
            default_show(message, category, filename, lineno, file, line)

    warnings.showwarning = _show


def _create_application():
    """QApplication with the Fusion style, UI font and dark stylesheet."""
    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QFont, QFontDatabase

    from .constants import FONT_FAMILIES
    from .theme import get_dark_stylesheet

    # Qt must not see TailPlot's own options (e.g. -h)
    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    font = QFont()
    available = set(QFontDatabase.families())
    family = next((f for f in FONT_FAMILIES if f in available), None)
    if family is not None:
        font.setFamily(family)
    font.setPointSize(10)
    app.setFont(font)

    app.setStyleSheet(get_dark_stylesheet())
    return app


def main(argv=None):
    """Parse the command line, then plot until the window is closed."""
    _check_dependencies()

    # Bad options exit with status 2 before any window or reading
    from .cli import parse_args
    config = parse_args(argv)

    sys.excepthook = _exception_hook
    _configure_warnings()

    os.environ.setdefault("QT_API", "pyside6")
    import matplotlib
    matplotlib.use('QtAgg')

    app = _create_application()

    from .gui_main import TailPlotWindow
    window = TailPlotWindow(config)
    window.resize(900, 600)
    window.show()
    window.start()

    status = app.exec()
    sys.exit(status or window.exit_code)


if __name__ == "__main__":
    main()
