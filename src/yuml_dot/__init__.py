"""yuml-dot — Translate yUML class and activity diagrams to Graphviz DOT."""

from __future__ import annotations

from .types import (
    Diagnostic,
    Diagram,
    Edge,
    Endpoint,
    Entity,
    TranslateOptions,
    TranslationResult,
)
from .errors import (
    ConflictingDeclaration,
    DirectiveError,
    MalformedStatement,
    RenderError,
    UnrecognizedSyntax,
    YumlError,
)
from .theme import DiagramColors, THEMES, DEFAULTS
from .parser import parse_yuml
from .renderer import render_dot
from .dot_runner import run_dot

__all__ = [
    "translate_yuml",
    "yuml_to_dot",
    "render_yuml",
    "parse_yuml",
    "render_dot",
    "run_dot",
    "THEMES",
    "DEFAULTS",
    "TranslateOptions",
    "TranslationResult",
    "Diagram",
    "Diagnostic",
    "Entity",
    "Edge",
    "Endpoint",
    "DiagramColors",
    "YumlError",
    "DirectiveError",
    "RenderError",
    "MalformedStatement",
    "UnrecognizedSyntax",
    "ConflictingDeclaration",
]


def translate_yuml(
    text: str,
    family: str | None = None,
    options: TranslateOptions | None = None,
) -> TranslationResult:
    """Translate yUML source to DOT, keeping the diagram and diagnostics.

    `family` ("class" or "activity") wins over the `// {type:...}`
    directive. Bad statements are skipped and reported in
    `result.diagnostics`; bad directives raise DirectiveError.
    """
    if options is None:
        options = TranslateOptions()

    diagram, diagnostics = parse_yuml(text, family, options.direction)  # type: ignore[arg-type]
    dot = render_dot(diagram, options)
    return TranslationResult(dot=dot, diagram=diagram, diagnostics=diagnostics)


def yuml_to_dot(
    text: str,
    family: str | None = None,
    options: TranslateOptions | None = None,
) -> str:
    """Translate yUML source to DOT text."""
    return translate_yuml(text, family, options).dot


def render_yuml(
    text: str,
    fmt: str = "svg",
    family: str | None = None,
    options: TranslateOptions | None = None,
) -> bytes:
    """Translate yUML source and render it with Graphviz `dot`."""
    return run_dot(yuml_to_dot(text, family, options), fmt)
