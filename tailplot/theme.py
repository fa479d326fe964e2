"""
Theme for TailPlot.

The Qt stylesheet is assembled from a table of ``selector -> properties``
so each widget TailPlot shows (menus, settings group boxes, checkboxes,
the Restart button, the chart toolbar, the status bar) is styled in one
place.  ``apply_plot_style`` pushes the matching matplotlib colours into
``rcParams`` before the chart is built.
"""

from typing import Dict, List, Tuple

from .constants import DARK_COLORS, PLOT_STYLE_DARK

Rule = Tuple[str, Dict[str, str]]


def _dark_rules(c: Dict[str, str]) -> List[Rule]:
    panel = {'background-color': c['bg_alt'], 'color': c['fg']}
    return [
        ("QMainWindow, QWidget", {
            'background-color': c['bg'], 'color': c['fg'], 'font-size': '13px',
        }),
        ("QMenuBar", panel),
        ("QMenuBar::item:selected, QMenu::item:selected", {
            'background-color': c['selection'],
        }),
        ("QMenu", {**panel, 'border': f"1px solid {c['border']}"}),
        ("QStatusBar", {
            'background-color': c['bg_alt'], 'color': c['fg_dim'],
            'border-top': f"1px solid {c['border']}",
        }),
        ("QSplitter::handle", {'background-color': c['border'], 'width': '3px'}),

        # Settings panel
        ("QGroupBox", {
            'border': f"1px solid {c['border']}", 'border-radius': '6px',
            'margin-top': '12px', 'padding-top': '14px',
            'font-weight': 'bold', 'color': c['accent'],
        }),
        ("QGroupBox::title", {
            'subcontrol-origin': 'margin', 'left': '10px', 'padding': '0 4px',
        }),
        ("QCheckBox", {'spacing': '8px'}),
        ("QCheckBox:disabled, QLabel:disabled", {'color': c['overlay0']}),
        ("QCheckBox::indicator", {
            'width': '14px', 'height': '14px', 'border-radius': '3px',
            'border': f"1px solid {c['border']}",
            'background-color': c['bg_input'],
        }),
        ("QCheckBox::indicator:checked", {
            'background-color': c['accent'], 'border-color': c['accent'],
        }),
        ("QPushButton", {
            'background-color': c['bg_widget'],
            'border': f"1px solid {c['border']}", 'border-radius': '4px',
            'padding': '5px 14px',
        }),
        ("QPushButton:hover", {'border-color': c['accent']}),
        ("QPushButton:pressed", {
            'background-color': c['accent'], 'color': c['bg'],
        }),
        ("QPushButton:disabled", {'color': c['fg_dim']}),

        # Chart navigation toolbar
        ("QToolBar", {'background-color': c['bg'], 'border': 'none'}),
        ("QToolButton:hover", {'background-color': c['selection']}),
        ("QToolTip", {
            'background-color': c['bg_widget'], 'color': c['fg'],
            'border': f"1px solid {c['accent']}", 'padding': '4px',
        }),
    ]


def _render(rules: List[Rule]) -> str:
    blocks = []
    for selector, props in rules:
        body = "\n".join(f"    {key}: {value};" for key, value in props.items())
        blocks.append(f"{selector} {{\n{body}\n}}")
    return "\n".join(blocks)


def get_dark_stylesheet() -> str:
    """Qt stylesheet for the dark theme."""
    return _render(_dark_rules(DARK_COLORS))


def apply_plot_style(style_dict: dict = PLOT_STYLE_DARK) -> None:
    """Update matplotlib ``rcParams`` with *style_dict*."""
    import matplotlib as mpl
    mpl.rcParams.update(style_dict)
