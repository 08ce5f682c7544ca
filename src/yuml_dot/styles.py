from __future__ import annotations

import re

from .types import Direction, Family

# ============================================================================
# DOT attribute defaults
# ============================================================================

DEFAULT_FONT = "Helvetica"

FONT_SIZE = 10

# Column at which class diagram labels are word wrapped
WRAP_WIDTH = 20

RANK_SEPARATION: dict[Family, float] = {
    "class": 0.7,
    "activity": 0.5,
}

LABEL_DISTANCE: dict[Family, int] = {
    "class": 2,
    "activity": 1,
}

BOX = {
    "margin": "0.20,0.05",
    "height": 0.5,
}

MARKER_SIZES = {
    "circle": 0.3,
    "diamond": 0.5,
    "junction": 0.01,
}

# Synchronisation bars are thin along the flow and wide across it
BAR = {
    "thickness": 0.05,
    "length": 0.5,
    "penwidth": 4,
    "fontsize": 1,
}

# Compass point where edges enter a bar, facing the flow direction
HEAD_PORTS: dict[Direction, str] = {
    "TB": "n",
    "LR": "w",
    "RL": "e",
}

TABLE_ATTRS = 'BORDER="0" CELLBORDER="1" CELLSPACING="0" CELLPADDING="9"'

# ============================================================================
# Colours — luminance decides whether text on a filled box turns white/black
# ============================================================================

BG_COLOR_REGEX = re.compile(r"^(.*)\{ *bg *: *([a-zA-Z]+\d*|#[0-9a-fA-F]{6}) *\}$", re.DOTALL)

DARK_LUMA = 64
LIGHT_LUMA = 192

# X11 names most often used in yUML documents
NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "orange": "#ffa500",
    "purple": "#a020f0",
    "pink": "#ffc0cb",
    "gray": "#bebebe",
    "grey": "#bebebe",
    "brown": "#a52a2a",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
    "navy": "#000080",
    "maroon": "#b03060",
    "gold": "#ffd700",
    "beige": "#f5f5dc",
    "ivory": "#fffff0",
    "khaki": "#f0e68c",
    "salmon": "#fa8072",
    "tomato": "#ff6347",
    "wheat": "#f5deb3",
    "tan": "#d2b48c",
    "cornsilk": "#fff8dc",
    "lightblue": "#add8e6",
    "lightgreen": "#90ee90",
    "lightgrey": "#d3d3d3",
    "lightyellow": "#ffffe0",
    "skyblue": "#87ceeb",
    "steelblue": "#4682b4",
    "darkblue": "#00008b",
    "darkgreen": "#006400",
    "darkred": "#8b0000",
    "midnightblue": "#191970",
    "indigo": "#4b0082",
    "violet": "#ee82ee",
    "orchid": "#da70d6",
    "turquoise": "#40e0d0",
    "green3": "#00cd00",
    "red3": "#cd0000",
    "blue3": "#0000cd",
}


def luma(color: str) -> float:
    """Relative luminance (0-255) of a `#rrggbb` or known colour name.

    Unknown names report mid-grey so they keep the default font colour.
    """
    color = color.strip().lower()
    hex_value = color if color.startswith("#") else NAMED_COLORS.get(color)
    if hex_value is None or not re.match(r"^#[0-9a-f]{6}$", hex_value):
        return 128.0
    red = int(hex_value[1:3], 16)
    green = int(hex_value[3:5], 16)
    blue = int(hex_value[5:7], 16)
    return 0.2126 * red + 0.7152 * green + 0.0722 * blue


def font_color_for(fill: str) -> str | None:
    value = luma(fill)
    if value < DARK_LUMA:
        return "white"
    if value > LIGHT_LUMA:
        return "black"
    return None
