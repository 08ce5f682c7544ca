from __future__ import annotations

import re

from .errors import MalformedStatement
from .styles import BG_COLOR_REGEX, font_color_for
from .types import EntityRef

# ============================================================================
# Shared lexing helpers for the class and activity grammars
# ============================================================================

TEXT = "text"

NOTE_PREFIX = "note:"

BRACE_BG_REGEX = re.compile(r"^\s*bg\s*:\s*([a-zA-Z]+\d*|#[0-9a-fA-F]{6})\s*$")

# Characters that may be backslash-escaped inside labels
ESCAPABLE = re.compile(r"\\([\[\](){}<>|,;\\])")


def scan_spans(statement: str, spans: dict[str, str]) -> list[tuple[str, str]]:
    """Cut a statement into bracketed spans and the text between them.

    Returns `(opener, body)` pairs for spans and `("text", text)` for
    non-blank runs of text outside any span.
    """
    pieces: list[tuple[str, str]] = []
    text_start = 0
    i = 0

    while i < len(statement):
        c = statement[i]
        if c == "\\":
            i += 2
            continue
        if c not in spans:
            i += 1
            continue

        _append_text(pieces, statement[text_start:i])
        end = _find_closer(statement, i, c, spans[c])
        if end == -1:
            raise MalformedStatement(f'Unclosed "{c}" at column {i + 1}', statement)
        pieces.append((c, statement[i + 1 : end]))
        i = end + 1
        text_start = i

    _append_text(pieces, statement[text_start:])
    return pieces


def _find_closer(statement: str, start: int, opener: str, closer: str) -> int:
    depth = 0
    i = start
    while i < len(statement):
        c = statement[i]
        if c == "\\":
            i += 2
            continue
        if c == closer and (depth > 0 or i > start):
            depth -= 1
            if depth == 0:
                return i
        elif c == opener:
            depth += 1
        i += 1
    return -1


def _append_text(pieces: list[tuple[str, str]], text: str) -> None:
    text = text.strip()
    if text:
        pieces.append((TEXT, text))


def unescape(text: str) -> str:
    return ESCAPABLE.sub(r"\1", text)


def parse_entity_body(
    body: str,
    brace: str | None = None,
    rounded: bool = False,
) -> EntityRef:
    """Interpret the inside of `[...]` or `(...)`.

    Handles the `{bg:colour}` suffix, the `note:` prefix, a note brace
    written after the closing bracket, and `|`-separated record compartments.
    """
    label = body.strip()
    fill: str | None = None

    bg_match = BG_COLOR_REGEX.match(label)
    if bg_match:
        label = bg_match.group(1).strip()
        fill = bg_match.group(2).strip().lower()

    is_note = False
    if label.startswith(NOTE_PREFIX):
        label = label[len(NOTE_PREFIX) :].strip()
        is_note = True

    if brace is not None:
        is_note = True
        brace_match = BRACE_BG_REGEX.match(brace)
        if brace_match:
            fill = brace_match.group(1).lower()

    font_color = font_color_for(fill) if fill else None

    if is_note:
        label = unescape(label)
        # Notes get their own namespace: [note: Order] and [Order] differ
        return EntityRef(
            key=f"{NOTE_PREFIX}{label}", label=label, kind="note", fill=fill, font_color=font_color
        )

    if _has_divider(label):
        compartments = tuple(unescape(part).strip() for part in _split_divider(label))
        return EntityRef(
            key=compartments[0],
            label="|".join(compartments),
            kind="record",
            compartments=compartments,
            fill=fill,
            font_color=font_color,
        )

    label = unescape(label)
    return EntityRef(
        key=label,
        label=label,
        kind="rectangle",
        fill=fill,
        font_color=font_color,
        rounded=rounded,
    )


def _has_divider(label: str) -> bool:
    return len(_split_divider(label)) > 1


def _split_divider(label: str) -> list[str]:
    """Split on `|` that is not backslash-escaped."""
    parts: list[str] = []
    current = ""
    i = 0
    while i < len(label):
        c = label[i]
        if c == "\\" and i + 1 < len(label):
            current += label[i : i + 2]
            i += 2
            continue
        if c == "|":
            parts.append(current)
            current = ""
        else:
            current += c
        i += 1
    parts.append(current)
    return parts
