from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# Diagram model — logical structure extracted from yUML text
# ============================================================================

Family = Literal["class", "activity"]

Direction = Literal["TB", "LR", "RL"]

ShapeKind = Literal[
    "rectangle",      # [Customer], (Fill Kettle)
    "record",         # [Product|EAN_Code|promo_price()]
    "note",           # [note: text], [text]{bg:colour}
    "diamond",        # <decision>
    "circle",         # (start)
    "doublecircle",   # (end)
    "bar",            # |fork|  (activity synchronisation bar)
    "point",          # association class junction
]

Arrow = Literal["none", "vee", "odiamond", "diamond", "empty"]

LineStyle = Literal["solid", "dashed"]

Compass = Literal["n", "w", "e"]

ErrorKind = Literal["MalformedStatement", "UnrecognizedSyntax", "ConflictingDeclaration"]


@dataclass(frozen=True, slots=True)
class Compartment:
    """One `|`-separated field of a record label, addressable as port f<index>."""

    index: int
    text: str

    @property
    def port(self) -> str:
        return f"f{self.index}"

    @property
    def lines(self) -> list[str]:
        return [line.strip() for line in self.text.split(";")]


@dataclass(frozen=True, slots=True)
class Entity:
    id: str
    label: str
    kind: ShapeKind
    compartments: tuple[Compartment, ...] = ()
    fill: str | None = None
    # Derived from the fill luminance; None keeps the graph default
    font_color: str | None = None
    # Activity steps written as (Step) get rounded corners
    rounded: bool = False


@dataclass(frozen=True, slots=True)
class Endpoint:
    entity_id: str
    port: str | None = None
    compass: Compass | None = None


@dataclass(frozen=True, slots=True)
class Edge:
    tail: Endpoint
    head: Endpoint
    arrowtail: Arrow = "none"
    arrowhead: Arrow = "none"
    label: str | None = None
    # Cardinality / role text at each end (class diagrams)
    taillabel: str | None = None
    headlabel: str | None = None
    style: LineStyle = "solid"
    # Keep both ends on the same rank (edges attached to notes)
    same_rank: bool = False


@dataclass(slots=True)
class Diagram:
    """Root aggregate for one translation.

    Entities keep first-mention order, edges keep statement order.
    """

    family: Family
    direction: Direction = "TB"
    entities: dict[str, Entity] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)

    def add_entity(self, entity: Entity) -> Entity:
        if entity.id in self.entities:
            raise ValueError(f'Duplicate entity identifier "{entity.id}"')
        self.entities[entity.id] = entity
        return entity

    def replace_entity(self, entity: Entity) -> Entity:
        """Swap in a restyled entity, keeping its position."""
        if entity.id not in self.entities:
            raise KeyError(entity.id)
        self.entities[entity.id] = entity
        return entity

    def add_edge(self, edge: Edge) -> Edge:
        self.edges.append(edge)
        return edge


# ============================================================================
# Statement tokens — what the family grammars hand to the element parser
# ============================================================================


@dataclass(frozen=True, slots=True)
class EntityRef:
    """An entity as written in one statement, before identity resolution."""

    # Identity key: header compartment for records, namespaced for <d> and |b|
    key: str
    label: str
    kind: ShapeKind
    compartments: tuple[str, ...] = ()
    fill: str | None = None
    font_color: str | None = None
    rounded: bool = False

    @property
    def is_bare(self) -> bool:
        """A plain [Name] mention that declares nothing beyond the name."""
        return self.kind == "rectangle" and self.fill is None and not self.compartments


@dataclass(frozen=True, slots=True)
class Connector:
    arrowtail: Arrow = "none"
    arrowhead: Arrow = "none"
    label: str | None = None
    taillabel: str | None = None
    headlabel: str | None = None
    style: LineStyle = "solid"


Token = EntityRef | Connector


# ============================================================================
# Diagnostics & results
# ============================================================================


@dataclass(frozen=True, slots=True)
class Statement:
    text: str
    # 1-based source line
    line: int
    # Set by the splitter when brackets do not balance
    error: str | None = None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    statement: str
    line: int
    kind: ErrorKind
    message: str


@dataclass(slots=True)
class TranslationResult:
    dot: str
    diagram: Diagram
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


# ============================================================================
# Translate options — user-facing configuration
# ============================================================================

@dataclass(slots=True)
class TranslateOptions:
    # Overrides the `// {direction:...}` directive
    direction: Direction | None = None
    dark: bool | None = None
    font: str | None = None
    wrap_width: int | None = None
