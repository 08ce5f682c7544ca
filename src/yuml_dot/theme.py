from __future__ import annotations

import re
from dataclasses import dataclass

from .styles import DEFAULT_FONT

# ============================================================================
# Types
# ============================================================================


@dataclass(slots=True)
class DiagramColors:
    """Stroke and text colours written into the DOT defaults.

    The background is always transparent so the image sits on any page.
    """

    fg: str
    text: str | None = None

    @property
    def font_color(self) -> str:
        return self.text or self.fg


# ============================================================================
# Theme palettes
# ============================================================================

THEMES: dict[str, DiagramColors] = {
    "light": DiagramColors(fg="black"),
    "dark": DiagramColors(fg="white"),
}

DEFAULTS = {"theme": "light", "font": DEFAULT_FONT}


def theme_colors(dark: bool | None) -> DiagramColors:
    return THEMES["dark" if dark else DEFAULTS["theme"]]


# ============================================================================
# DOT graph header
# ============================================================================


def build_dot_header(colors: DiagramColors, font: str | None = None) -> list[str]:
    """Opening `digraph` line plus graph/node/edge default attribute lines."""
    font = font or DEFAULTS["font"]
    if not re.match(r"^[A-Za-z_][A-Za-z0-9_]*$", font):
        font = '"' + font.replace('"', '\\"') + '"'
    palette = f"color={colors.fg}, fontcolor={colors.font_color}"
    return [
        "digraph G {",
        f"  graph [ bgcolor=transparent, fontname={font} ]",
        f"  node [ shape=none, margin=0, {palette}, fontname={font} ]",
        f"  edge [ {palette}, fontname={font} ]",
    ]
