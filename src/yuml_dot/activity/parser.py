from __future__ import annotations

from ..errors import UnrecognizedSyntax
from ..tokens import TEXT, parse_entity_body, scan_spans, unescape
from ..types import Arrow, Connector, EntityRef, Token

# ============================================================================
# Activity diagram grammar
#
# Supported syntax:
#   (start), (end)                          start / end markers
#   (Find Products), [Find Products]        activity (rounded / square)
#   (start)->(Find Products)->(end)         flow chains
#   <d1>                                    decision
#   <d1>logged in->(Show Dashboard)         labelled branch
#   <a>[kettle empty]->(Fill Kettle)        guarded branch
#   (Action1)->|a|, (Action 2)->|a|         fork / join bar
#   (Action1)-(note: A note message here)   note
# ============================================================================

ACTIVITY_SPANS = {"(": ")", "<": ">", "|": "|", "[": "]", "{": "}"}

ENTITY_OPENERS = "(<|["

ARROW = "->"
LINE = "-"


def tokenize_activity_statement(statement: str) -> list[Token]:
    """Tokenize one activity diagram statement.

    Entities and connectors must alternate; a `[guard]` may sit right
    before a connector and becomes part of the edge label.
    """
    pieces = scan_spans(statement, ACTIVITY_SPANS)
    tokens: list[Token] = []
    expect_entity = True
    guard: str | None = None

    i = 0
    while i < len(pieces):
        opener, body = pieces[i]

        if expect_entity:
            if opener not in ENTITY_OPENERS:
                raise UnrecognizedSyntax(f'Expected an activity, decision or bar, got "{body}"', statement)
            brace = None
            if i + 1 < len(pieces) and pieces[i + 1][0] == "{":
                brace = pieces[i + 1][1]
                i += 1
            tokens.append(_entity(opener, body, brace))
            expect_entity = False

        elif opener == "[" and guard is None:
            guard = f"[{unescape(body.strip())}]"

        elif opener == TEXT:
            tokens.append(_connector(body, guard, statement))
            guard = None
            expect_entity = True

        else:
            raise UnrecognizedSyntax(f'Expected "->" or "-" before "{opener}{body}"', statement)
        i += 1

    if guard is not None:
        raise UnrecognizedSyntax(f'Guard "{guard}" is not followed by "->"', statement)
    return tokens


def _entity(opener: str, body: str, brace: str | None) -> EntityRef:
    name = body.strip()
    if opener == "(":
        if name == "start" and brace is None:
            return EntityRef(key="(start)", label="", kind="circle")
        if name == "end" and brace is None:
            return EntityRef(key="(end)", label="", kind="doublecircle")
        return parse_entity_body(body, brace=brace, rounded=True)
    if opener == "<":
        name = unescape(name)
        # Decisions and bars get their own namespaces, like the start and end
        # markers: <a>, |a| and (start) never merge with a step of that name
        return EntityRef(key=f"<{name}>", label=name, kind="diamond")
    if opener == "|":
        name = unescape(name)
        return EntityRef(key=f"|{name}|", label=name, kind="bar")
    return parse_entity_body(body, brace=brace)


def _connector(text: str, guard: str | None, statement: str) -> Connector:
    text = text.strip()
    arrowhead: Arrow
    if text.endswith(ARROW):
        arrowhead = "vee"
        text = text[: -len(ARROW)].strip()
    elif text == LINE:
        arrowhead = "none"
        text = ""
    else:
        raise UnrecognizedSyntax(f'Unknown connector "{text}"', statement)

    label = " ".join(part for part in (guard, unescape(text)) if part)
    return Connector(arrowhead=arrowhead, label=label or None)
