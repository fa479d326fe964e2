"""
TailPlot v1.0.0

Live plotting of a growing text file or standard input: "tail -f, but
plotted".  Selected columns of each appended line are parsed into
numeric points and drawn on a chart whose axes auto-scale as data
arrives.  Truncated or rotated files restart the plot from scratch.
"""

APP_NAME = "TailPlot"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-18"
__version__ = APP_VERSION
