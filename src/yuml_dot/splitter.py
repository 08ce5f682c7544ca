from __future__ import annotations

import re
from dataclasses import dataclass

from .activity.parser import ACTIVITY_SPANS
from .class_diagram.parser import CLASS_SPANS
from .errors import DirectiveError
from .types import Direction, Family, Statement

# ============================================================================
# Directives and statement splitting
#
# A yUML document is a list of lines. `//` lines are comments; the special
# form `// {key:value}` configures the translation. Every other line holds
# one or more comma-separated statements.
# ============================================================================

DIRECTIVE_REGEX = re.compile(r"^//\s+\{\s*(\w+)\s*:\s*(\w+)\s*\}$")

DIRECTIONS: dict[str, Direction] = {
    "topDown": "TB",
    "leftToRight": "LR",
    "rightToLeft": "RL",
}

FAMILIES: tuple[Family, ...] = ("class", "activity")

# Recognised yUML types this package does not translate
UNSUPPORTED_TYPES = ("usecase", "state", "deployment", "package", "sequence")

# Opaque spans per family: opener -> closer
SPANS: dict[Family, dict[str, str]] = {
    "class": CLASS_SPANS,
    "activity": ACTIVITY_SPANS,
}

# Closers that are plain text when no span is open (`->`, `<>`)
LOOSE_CLOSERS: dict[Family, str] = {
    "class": ">)",
    "activity": ">",
}

ESCAPE = "\\"


@dataclass(slots=True)
class Directives:
    family: Family | None = None
    direction: Direction | None = None
    generate: bool = False


def read_directives(text: str) -> tuple[Directives, list[tuple[int, str]]]:
    """Strip comments and directives from yUML source.

    Returns the directives plus the remaining non-empty lines, each paired
    with its 1-based line number.
    """
    directives = Directives()
    lines: list[tuple[int, str]] = []

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line.startswith("//"):
            m = DIRECTIVE_REGEX.match(line)
            if m:
                _apply_directive(directives, m.group(1), m.group(2))
            continue
        lines.append((number, line))

    return directives, lines


def _apply_directive(directives: Directives, key: str, value: str) -> None:
    if key == "type":
        if value in FAMILIES:
            directives.family = value  # type: ignore[assignment]
        elif value in UNSUPPORTED_TYPES:
            raise DirectiveError(f'Diagram type "{value}" is not supported. Use class or activity.')
        else:
            raise DirectiveError(
                f'Invalid value for "type": "{value}". '
                "Allowed values are: class, usecase, activity, state, deployment, package, sequence."
            )
    elif key == "direction":
        direction = DIRECTIONS.get(value)
        if direction is None:
            raise DirectiveError(
                f'Invalid value for "direction": "{value}". '
                "Allowed values are: leftToRight, rightToLeft, topDown (default)."
            )
        directives.direction = direction
    elif key == "generate":
        if value not in ("true", "false"):
            raise DirectiveError(
                f'Invalid value for "generate": "{value}". Allowed values are: true, false (default).'
            )
        directives.generate = value == "true"
    # Unknown keys are ignored


# ============================================================================
# Statement splitter
# ============================================================================


def split_statements(lines: list[tuple[int, str]], family: Family) -> list[Statement]:
    """Split numbered lines into statements, in document order.

    Statements whose brackets do not balance come back with `error` set so
    the caller can report them and carry on.
    """
    statements: list[Statement] = []
    for number, line in lines:
        statements.extend(split_line(line, family, number))
    return statements


def split_line(line: str, family: Family, number: int = 1) -> list[Statement]:
    spans = SPANS[family]
    closers = set(spans.values()) - set(spans) - set(LOOSE_CLOSERS[family])

    statements: list[Statement] = []
    start = 0
    # Innermost open span: (opener, depth, position of the outermost opener)
    opener: str | None = None
    depth = 0
    opened_at = 0
    stray: str | None = None

    i = 0
    while i < len(line):
        c = line[i]
        if c == ESCAPE:
            i += 2
            continue

        if opener is not None:
            closer = spans[opener]
            if c == closer:
                depth -= 1
                if depth == 0:
                    opener = None
            elif c == opener:
                depth += 1
        elif c in spans:
            opener, depth, opened_at = c, 1, i
        elif c in closers:
            stray = stray or f'Unexpected "{c}" at column {i + 1}'
        elif c == ",":
            _emit(statements, line[start:i], number, stray)
            start = i + 1
            stray = None
        i += 1

    if opener is None:
        _emit(statements, line[start:], number, stray)
        return statements

    # Unclosed span: the bad statement runs to the next comma after the
    # opener; everything after that is split afresh.
    comma = line.find(",", opened_at)
    end = len(line) if comma == -1 else comma
    message = f'Unclosed "{opener}" at column {opened_at + 1}'
    _emit(statements, line[start:end], number, message)
    if comma != -1:
        statements.extend(split_line(line[comma + 1 :], family, number))
    return statements


def _emit(statements: list[Statement], text: str, number: int, error: str | None) -> None:
    text = text.strip()
    if text:
        statements.append(Statement(text=text, line=number, error=error))
