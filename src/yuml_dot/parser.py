from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from .activity.parser import tokenize_activity_statement
from .class_diagram.parser import tokenize_class_statement
from .errors import (
    ConflictingDeclaration,
    DirectiveError,
    MalformedStatement,
    StatementError,
    UnrecognizedSyntax,
)
from .splitter import FAMILIES, read_directives, split_statements
from .styles import HEAD_PORTS
from .types import (
    Compartment,
    Connector,
    Diagnostic,
    Diagram,
    Direction,
    Edge,
    Endpoint,
    Entity,
    EntityRef,
    Family,
    Statement,
    Token,
)

logger = logging.getLogger(__name__)

# ============================================================================
# yUML parser — directives, statements, and the element parser
# ============================================================================

TOKENIZERS: dict[Family, Callable[[str], list[Token]]] = {
    "class": tokenize_class_statement,
    "activity": tokenize_activity_statement,
}


def parse_yuml(
    text: str,
    family: Family | None = None,
    direction: Direction | None = None,
) -> tuple[Diagram, list[Diagnostic]]:
    """Parse yUML source into a Diagram plus per-statement diagnostics.

    `family` and `direction` override the `type` and `direction` directives.
    """
    directives, lines = read_directives(text)

    family = family or directives.family
    if family is None:
        raise DirectiveError('Missing mandatory "type" directive, e.g. "// {type:class}"')
    if family not in FAMILIES:
        raise DirectiveError(f'Unsupported diagram family "{family}". Use class or activity.')

    direction = direction or directives.direction or "TB"
    if direction not in HEAD_PORTS:
        raise DirectiveError(f'Invalid direction "{direction}". Use TB, LR or RL.')

    parser = ElementParser(family, direction)
    parser.parse(split_statements(lines, family))
    return parser.diagram, parser.diagnostics


class ElementParser:
    """Builds one Diagram from a stream of statements.

    Owns the label -> identifier table, so each translation gets its own
    identity space. Statement errors are recorded in `diagnostics` and the
    offending statement is skipped.
    """

    def __init__(self, family: Family, direction: Direction = "TB") -> None:
        self.family = family
        self.diagram = Diagram(family=family, direction=direction)
        self.diagnostics: list[Diagnostic] = []
        self._tokenize = TOKENIZERS[family]
        self._ids: dict[str, str] = {}
        # Incoming edges per synchronisation bar, one port each
        self._bar_ports: dict[str, int] = {}

    def parse(self, statements: list[Statement]) -> Diagram:
        for statement in statements:
            self.feed(statement)
        return self.diagram

    def feed(self, statement: Statement) -> None:
        if statement.error is not None:
            self._report(MalformedStatement(statement.error, statement.text), statement)
            return
        try:
            tokens = self._tokenize(statement.text)
            self._merge(tokens, statement)
        except StatementError as err:
            self._report(err, statement)

    # ------------------------------------------------------------------------
    # Statement shapes
    # ------------------------------------------------------------------------

    def _merge(self, tokens: list[Token], statement: Statement) -> None:
        if _is_chain(tokens):
            self._merge_chain(tokens, statement)
        elif self.family == "class" and _is_association_class(tokens):
            self._merge_association_class(tokens, statement)
        else:
            raise UnrecognizedSyntax("Statement matches no known pattern", statement.text)

    def _merge_chain(self, tokens: list[Token], statement: Statement) -> None:
        """`E`, `E C E`, `E C E C E`, ... one edge per connector."""
        endpoints = {
            i: self._resolve(token, statement)
            for i, token in enumerate(tokens)
            if isinstance(token, EntityRef)
        }
        for i in range(1, len(tokens), 2):
            connector = tokens[i]
            assert isinstance(connector, Connector)
            self._add_edge(endpoints[i - 1], connector, endpoints[i + 1])

    def _merge_association_class(self, tokens: list[Token], statement: Statement) -> None:
        """`[A]op[B][C]`: C hangs off an invisible junction on the A-B line."""
        connector = tokens[1]
        assert isinstance(connector, Connector)
        tail = self._resolve(tokens[0], statement)
        head = self._resolve(tokens[2], statement)
        association = self._resolve(tokens[3], statement)

        junction_id = f"{tail.entity_id}J{head.entity_id}"
        if junction_id not in self.diagram.entities:
            self.diagram.add_entity(Entity(id=junction_id, label="", kind="point"))
        junction = Endpoint(junction_id)

        self.diagram.add_edge(
            Edge(
                tail=tail,
                head=junction,
                arrowtail=connector.arrowtail,
                taillabel=connector.taillabel,
                style=connector.style,
            )
        )
        self.diagram.add_edge(
            Edge(
                tail=junction,
                head=head,
                arrowhead=connector.arrowhead,
                headlabel=connector.headlabel,
                style=connector.style,
            )
        )
        self.diagram.add_edge(
            Edge(
                tail=association,
                head=junction,
                arrowhead="vee",
                style="dashed",
                same_rank=True,
            )
        )

    def _add_edge(self, tail: Endpoint, connector: Connector, head: Endpoint) -> None:
        touches_note = self._kind(tail) == "note" or self._kind(head) == "note"
        if self._kind(head) == "bar":
            head = self._next_bar_port(head)

        self.diagram.add_edge(
            Edge(
                tail=tail,
                head=head,
                arrowtail=connector.arrowtail,
                arrowhead=connector.arrowhead,
                label=connector.label,
                taillabel=connector.taillabel,
                headlabel=connector.headlabel,
                style="dashed" if touches_note else connector.style,
                same_rank=touches_note and self.family == "class",
            )
        )

    def _next_bar_port(self, head: Endpoint) -> Endpoint:
        count = self._bar_ports.get(head.entity_id, 0) + 1
        self._bar_ports[head.entity_id] = count
        return Endpoint(
            head.entity_id,
            port=f"f{count}",
            compass=HEAD_PORTS[self.diagram.direction],  # type: ignore[arg-type]
        )

    # ------------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------------

    def _resolve(self, token: Token, statement: Statement) -> Endpoint:
        """Find or create the entity for a reference.

        First sight fixes shape and compartments; a later fill colour
        replaces the earlier one.
        """
        assert isinstance(token, EntityRef)
        entity_id = self._ids.get(token.key)
        if entity_id is None:
            entity_id = f"A{len(self._ids) + 1}"
            self._ids[token.key] = entity_id
            self.diagram.add_entity(
                Entity(
                    id=entity_id,
                    label=token.label,
                    kind=token.kind,
                    compartments=tuple(
                        Compartment(index=i, text=text) for i, text in enumerate(token.compartments)
                    ),
                    fill=token.fill,
                    font_color=token.font_color,
                    rounded=token.rounded,
                )
            )
            return Endpoint(entity_id)

        entity = self.diagram.entities[entity_id]

        port = _compartment_port(entity, token)
        if port is None and not token.is_bare and _declares_differently(entity, token):
            self._report(
                ConflictingDeclaration(
                    f'"{token.key}" is already a {_describe(entity)}; '
                    f"keeping it over the new {token.kind} declaration",
                    statement.text,
                ),
                statement,
            )

        if token.fill is not None and token.fill != entity.fill:
            self.diagram.replace_entity(replace(entity, fill=token.fill, font_color=token.font_color))

        return Endpoint(entity_id, port=port)

    def _kind(self, endpoint: Endpoint) -> str:
        return self.diagram.entities[endpoint.entity_id].kind

    def _report(self, err: StatementError, statement: Statement) -> None:
        diagnostic = Diagnostic(
            statement=statement.text,
            line=statement.line,
            kind=err.kind,  # type: ignore[arg-type]
            message=err.message,
        )
        self.diagnostics.append(diagnostic)
        if isinstance(err, ConflictingDeclaration):
            logger.info("line %d: %s", statement.line, err.message)
        else:
            logger.warning("line %d: dropping %r: %s", statement.line, statement.text, err.message)


# ============================================================================
# Shared utilities
# ============================================================================


def _is_chain(tokens: list[Token]) -> bool:
    if len(tokens) % 2 == 0:
        return False
    for i, token in enumerate(tokens):
        expected = EntityRef if i % 2 == 0 else Connector
        if not isinstance(token, expected):
            return False
    return True


def _is_association_class(tokens: list[Token]) -> bool:
    kinds = [type(token) for token in tokens]
    return kinds == [EntityRef, Connector, EntityRef, EntityRef]


def _compartment_port(entity: Entity, token: EntityRef) -> str | None:
    """Port named by `[Name|row]` when `row` is one of Name's compartments.

    The whole entity wins unless exactly one non-header row is named.
    """
    if entity.kind != "record" or token.kind != "record" or len(token.compartments) != 2:
        return None
    if token.compartments == tuple(c.text for c in entity.compartments):
        return None
    row = token.compartments[1]
    for compartment in entity.compartments[1:]:
        if row == compartment.text or row in compartment.lines:
            return compartment.port
    return None


def _declares_differently(entity: Entity, token: EntityRef) -> bool:
    if token.kind != entity.kind:
        return True
    if token.kind == "record":
        return token.compartments != tuple(c.text for c in entity.compartments)
    return False


def _describe(entity: Entity) -> str:
    if entity.kind == "record":
        return f"record with {len(entity.compartments)} compartments"
    return entity.kind
