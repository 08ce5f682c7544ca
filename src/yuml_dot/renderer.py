from __future__ import annotations

import html
import logging
import textwrap
from dataclasses import dataclass
from typing import Callable

from .styles import (
    BAR,
    BOX,
    FONT_SIZE,
    LABEL_DISTANCE,
    MARKER_SIZES,
    RANK_SEPARATION,
    TABLE_ATTRS,
    WRAP_WIDTH,
)
from .theme import build_dot_header, theme_colors
from .types import Diagram, Edge, Endpoint, Entity, Family, ShapeKind, TranslateOptions

logger = logging.getLogger(__name__)

# ============================================================================
# DOT renderer
#
# Serializes a Diagram into a Graphviz DOT document. Output depends only on
# the Diagram and the options, so the same input always yields the same
# bytes.
#
# Render order:
#   1. Header (graph/node/edge defaults, ranksep, rankdir)
#   2. One node statement per entity, first-mention order
#   3. One edge statement per edge, declaration order
# ============================================================================


@dataclass(slots=True)
class _Context:
    family: Family
    direction: str
    wrap_width: int
    # Number of ports on each synchronisation bar
    bar_ports: dict[str, int]


Attrs = list[tuple[str, str]]


def render_dot(diagram: Diagram | None, options: TranslateOptions | None = None) -> str:
    """Render a parsed Diagram as DOT text.

    Args:
        diagram: The diagram to serialize. Passing None is a caller error.
        options: Theme, font and label wrapping overrides.
    """
    if diagram is None:
        raise ValueError("render_dot() needs a Diagram; got None")
    if options is None:
        options = TranslateOptions()

    ctx = _Context(
        family=diagram.family,
        direction=diagram.direction,
        wrap_width=WRAP_WIDTH if options.wrap_width is None else options.wrap_width,
        bar_ports=_bar_port_counts(diagram),
    )

    lines = build_dot_header(theme_colors(options.dark), options.font)
    lines.append(f"  ranksep = {RANK_SEPARATION[diagram.family]}")
    lines.append(f"  rankdir = {diagram.direction}")

    for entity in diagram.entities.values():
        lines.append(f"  {entity.id} {_attr_list(NODE_RENDERERS[entity.kind](entity, ctx))}")

    for edge in diagram.edges:
        lines.append(f"  {_render_edge(edge, ctx)}")

    lines.append("}")
    logger.debug(
        "rendered %d nodes and %d edges", len(diagram.entities), len(diagram.edges)
    )
    return "\n".join(lines) + "\n"


# ============================================================================
# Nodes — one renderer per shape kind
# ============================================================================


def _render_box(entity: Entity, ctx: _Context) -> Attrs:
    """Rectangles and notes: plain or multi-line quoted label."""
    if ctx.family == "class":
        label = wrap_label(entity.label, ctx.wrap_width)
    else:
        label = wrap_label(entity.label, 0)

    styles = []
    if entity.rounded:
        styles.append("rounded")
    if entity.fill:
        styles.append("filled")

    attrs: Attrs = [
        ("shape", quote(entity.kind)),
        ("margin", quote(BOX["margin"])),
        ("label", quote(label)),
        ("style", quote(",".join(styles))),
    ]
    if entity.fill:
        attrs.append(("fillcolor", quote(entity.fill)))
    if entity.font_color:
        attrs.append(("fontcolor", quote(entity.font_color)))
    attrs.append(("height", _num(BOX["height"])))
    attrs.append(("fontsize", _num(FONT_SIZE)))
    return attrs


def _render_record(entity: Entity, ctx: _Context) -> Attrs:
    """Compartments as an HTML-like table, one addressable row each."""
    table = f"<TABLE {TABLE_ATTRS}"
    if entity.fill:
        table += f' BGCOLOR="{html.escape(entity.fill)}"'
    table += ">"

    for compartment in entity.compartments:
        text = "<BR/>".join(html.escape(line) for line in compartment.lines)
        if entity.font_color:
            text = f'<FONT COLOR="{entity.font_color}">{text}</FONT>'
        table += f'<TR><TD PORT="{compartment.port}">{text}</TD></TR>'
    table += "</TABLE>"

    return [
        ("fontsize", _num(FONT_SIZE)),
        ("label", f"<{table}>"),
    ]


def _render_terminal(entity: Entity, ctx: _Context) -> Attrs:
    """Start (circle) and end (doublecircle) markers."""
    size = _num(MARKER_SIZES["circle"])
    return [
        ("shape", quote(entity.kind)),
        ("margin", quote("0,0")),
        ("label", quote("")),
        ("style", quote("")),
        ("height", size),
        ("width", size),
    ]


def _render_decision(entity: Entity, ctx: _Context) -> Attrs:
    size = _num(MARKER_SIZES["diamond"])
    return [
        ("shape", quote("diamond")),
        ("margin", quote("0,0")),
        ("label", quote("")),
        ("style", quote("")),
        ("height", size),
        ("width", size),
        ("fontsize", "0"),
    ]


def _render_bar(entity: Entity, ctx: _Context) -> Attrs:
    """Fork/join bar: a thin filled record with one port per incoming edge."""
    ports = "|".join(f"<f{i}>" for i in range(1, ctx.bar_ports.get(entity.id, 0) + 1))
    if ctx.direction == "TB":
        height, width = BAR["thickness"], BAR["length"]
    else:
        height, width = BAR["length"], BAR["thickness"]
    return [
        ("shape", quote("record")),
        ("margin", quote("0,0")),
        ("label", quote(ports)),
        ("style", quote("filled")),
        ("height", _num(height)),
        ("width", _num(width)),
        ("fontsize", _num(BAR["fontsize"])),
        ("penwidth", _num(BAR["penwidth"])),
    ]


def _render_junction(entity: Entity, ctx: _Context) -> Attrs:
    size = _num(MARKER_SIZES["junction"])
    return [
        ("shape", quote("point")),
        ("style", quote("invis")),
        ("label", quote("")),
        ("height", size),
        ("width", size),
    ]


NODE_RENDERERS: dict[ShapeKind, Callable[[Entity, _Context], Attrs]] = {
    "rectangle": _render_box,
    "note": _render_box,
    "record": _render_record,
    "circle": _render_terminal,
    "doublecircle": _render_terminal,
    "diamond": _render_decision,
    "bar": _render_bar,
    "point": _render_junction,
}


# ============================================================================
# Edges
# ============================================================================


def _render_edge(edge: Edge, ctx: _Context) -> str:
    attrs: Attrs = [
        ("dir", quote("both")),
        ("style", quote(edge.style)),
        ("arrowtail", quote(edge.arrowtail)),
        ("arrowhead", quote(edge.arrowhead)),
    ]
    if edge.label:
        attrs.append(("label", quote(edge.label)))
    if edge.taillabel:
        attrs.append(("taillabel", quote(edge.taillabel)))
    if edge.headlabel:
        attrs.append(("headlabel", quote(edge.headlabel)))
    attrs.append(("labeldistance", _num(LABEL_DISTANCE[ctx.family])))
    attrs.append(("fontsize", _num(FONT_SIZE)))

    statement = f"{_endpoint(edge.tail)} -> {_endpoint(edge.head)} {_attr_list(attrs)}"
    if edge.same_rank:
        return f"{{ rank=same; {statement}; }}"
    return statement


def _endpoint(endpoint: Endpoint) -> str:
    parts = [endpoint.entity_id]
    if endpoint.port:
        parts.append(endpoint.port)
    if endpoint.compass:
        parts.append(endpoint.compass)
    return ":".join(parts)


def _bar_port_counts(diagram: Diagram) -> dict[str, int]:
    counts: dict[str, int] = {}
    for edge in diagram.edges:
        head = edge.head
        if head.port is None or diagram.entities[head.entity_id].kind != "bar":
            continue
        counts[head.entity_id] = max(counts.get(head.entity_id, 0), int(head.port[1:]))
    return counts


# ============================================================================
# Escaping & formatting
# ============================================================================


def quote(value: str) -> str:
    """DOT double-quoted string with backslash, quote and newline escaped."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def wrap_label(label: str, width: int) -> str:
    """Turn `;` into line breaks and word wrap each line at `width` columns.

    A width of 0 disables wrapping.
    """
    lines: list[str] = []
    for line in label.split(";"):
        line = line.strip()
        if width > 0 and len(line) > width:
            lines.extend(textwrap.wrap(line, width, break_long_words=False, break_on_hyphens=False))
        else:
            lines.append(line)
    return "\n".join(lines)


def _attr_list(attrs: Attrs) -> str:
    return "[" + ", ".join(f"{key}={value}" for key, value in attrs) + "]"


def _num(value: float) -> str:
    return f"{value:g}"
