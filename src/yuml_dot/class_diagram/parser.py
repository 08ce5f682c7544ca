from __future__ import annotations

from ..errors import UnrecognizedSyntax
from ..tokens import TEXT, parse_entity_body, scan_spans
from ..types import Arrow, Connector, LineStyle, Token

# ============================================================================
# Class diagram grammar
#
# Turns one yUML class statement into a flat token list of entities and
# connectors. Supported syntax:
#   [Customer]                              class
#   [Customer]->[Order]                     directed association
#   [Customer]<->[Order]                    bidirectional
#   [Customer]+-[Order], [Customer]<>-[Order]   aggregation
#   [Customer]++-[Order]                    composition
#   [Customer]^[Cool Customer], [Base]^-[Derived]   inheritance
#   [Customer]uses-.->[PaymentStrategy]     dependency (dashed)
#   [Customer]<1-1..2>[Address]             cardinality
#   [Person]customer-billingAddress[Address]    role labels
#   [Customer|Forename;Surname|Save()]      compartments
#   [note: Value Object{bg:wheat}]          note
#   [Customer{bg:orange}]                   fill colour
#   [Student]-[Course][Enrolment]           association class
# ============================================================================

CLASS_SPANS = {"[": "]", "{": "}"}

DASHED_LINE = "-.-"
SOLID_LINE = "-"

# Checked in order, so two-character markers win over their prefixes
TAIL_MARKERS: list[tuple[str, Arrow]] = [
    ("<>", "odiamond"),
    ("++", "diamond"),
    ("+", "odiamond"),
    ("<", "vee"),
    ("^", "empty"),
]

HEAD_MARKERS: list[tuple[str, Arrow]] = [
    ("<>", "odiamond"),
    ("++", "diamond"),
    ("+", "odiamond"),
    (">", "vee"),
    ("^", "empty"),
]


def tokenize_class_statement(statement: str) -> list[Token]:
    """Tokenize one class diagram statement.

    Raises UnrecognizedSyntax when text between two boxes is not a
    relationship operator.
    """
    pieces = scan_spans(statement, CLASS_SPANS)
    tokens: list[Token] = []

    i = 0
    while i < len(pieces):
        opener, body = pieces[i]
        if opener == "[":
            brace = None
            if i + 1 < len(pieces) and pieces[i + 1][0] == "{":
                brace = pieces[i + 1][1]
                i += 1
            tokens.append(parse_entity_body(body, brace=brace))
        elif opener == TEXT:
            connector = parse_connector(body)
            if connector is None:
                raise UnrecognizedSyntax(f'Unknown relationship "{body}"', statement)
            tokens.append(connector)
        else:
            raise UnrecognizedSyntax(f'Unexpected "{{{body}}}" outside a class box', statement)
        i += 1

    return tokens


def parse_connector(text: str) -> Connector | None:
    """Map relationship syntax to tail/head arrows and end labels.

    Returns None when the text holds no line (`-`, `-.-`) and is not the
    bare inheritance marker `^`.
    """
    text = text.strip()
    if text == "^":
        return Connector(arrowtail="empty")

    style: LineStyle
    if DASHED_LINE in text:
        style = "dashed"
        left, right = text.split(DASHED_LINE, 1)
    elif SOLID_LINE in text:
        style = "solid"
        left, right = text.split(SOLID_LINE, 1)
    else:
        return None

    arrowtail, taillabel = _tail_marker(left.strip())
    arrowhead, headlabel = _head_marker(right.strip())
    return Connector(
        arrowtail=arrowtail,
        arrowhead=arrowhead,
        taillabel=taillabel or None,
        headlabel=headlabel or None,
        style=style,
    )


def _tail_marker(text: str) -> tuple[Arrow, str]:
    for marker, arrow in TAIL_MARKERS:
        if text.startswith(marker):
            return arrow, text[len(marker) :].strip()
    return "none", text


def _head_marker(text: str) -> tuple[Arrow, str]:
    for marker, arrow in HEAD_MARKERS:
        if text.endswith(marker):
            return arrow, text[: len(text) - len(marker)].strip()
    return "none", text
