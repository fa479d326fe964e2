"""
Constants for TailPlot.

Centralises the ingestion defaults, auto-scale parameters, the series
colour table, and the dark GUI / matplotlib palettes.
"""

# ── Ingestion defaults ───────────────────────────────────────────────────
DEFAULT_FIELD_SEPARATOR = r"[,\t ]+"
COMMENT_MARKER = "#"
POLL_INTERVAL_S = 0.1
STDIN_TITLE = "<standard input>"

# ── Auto-scale ───────────────────────────────────────────────────────────
AUTOSCALE_MARGIN_FRACTION = 0.1
# Used when min == max == 0, where a proportional margin would be zero
DEGENERATE_MARGIN = 1.0
# Axis range shown before any data arrives (and after a restart)
EMPTY_AXIS_RANGE = (0.0, 1.0)

# ── Date display default (strftime) ─────────────────────────────────────
DEFAULT_DATE_DISPLAY = "%Y-%m-%d %H:%M:%S"

# ── Font family fallback chain ──────────────────────────────────────────
FONT_FAMILIES = ("Segoe UI", "DejaVu Sans", "Noto Sans", "Helvetica", "Arial")

# ── GUI palette (dark) ──────────────────────────────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'accent':       '#89b4fa',
    'border':       '#45475a',
    'overlay0':     '#6c7086',
    'selection':    '#45475a',
}

# ── Series colour table, indexed cyclically by field order ──────────────
SERIES_COLORS = (
    '#f38ba8',   # red
    '#a6e3a1',   # green
    '#89b4fa',   # blue
    '#f9e2af',   # yellow
    '#fab387',   # orange
    '#89dceb',   # cyan
    '#cba6f7',   # magenta
    '#f5c2e7',   # pink
    '#9399b2',   # gray
    '#ffffff',   # white
)

# ── Matplotlib dark-theme style dict ────────────────────────────────────
PLOT_STYLE_DARK = {
    'figure.facecolor':  DARK_COLORS['bg_alt'],
    'axes.facecolor':    DARK_COLORS['bg_widget'],
    'axes.edgecolor':    DARK_COLORS['border'],
    'axes.labelcolor':   DARK_COLORS['fg'],
    'text.color':        DARK_COLORS['fg'],
    'xtick.color':       DARK_COLORS['fg_dim'],
    'ytick.color':       DARK_COLORS['fg_dim'],
    'xtick.labelsize':   8,
    'ytick.labelsize':   8,
    'axes.labelsize':    9,
    'axes.titlesize':    10,
    'legend.fontsize':   7,
    'grid.color':        DARK_COLORS['border'],
    'legend.facecolor':  DARK_COLORS['bg_widget'],
    'legend.edgecolor':  DARK_COLORS['border'],
}


def series_color(index: int) -> str:
    """Colour for the field at 0-based *index*, cycling through the table.

    >>> series_color(0)
    '#f38ba8'
    >>> series_color(10)
    '#f38ba8'
    """
    if index < 0:
        raise ValueError(f"series_color requires non-negative index, got {index}")
    return SERIES_COLORS[index % len(SERIES_COLORS)]
