from __future__ import annotations

# ============================================================================
# Error taxonomy
#
# Statement-level errors (MalformedStatement, UnrecognizedSyntax,
# ConflictingDeclaration) are collected as diagnostics and never abort a
# translation. DirectiveError and RenderError are fatal.
# ============================================================================


class YumlError(ValueError):
    """Base class for everything raised by yuml_dot."""


class StatementError(YumlError):
    """An error tied to one yUML statement."""

    kind = "StatementError"

    def __init__(self, message: str, statement: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.statement = statement


class MalformedStatement(StatementError):
    kind = "MalformedStatement"


class UnrecognizedSyntax(StatementError):
    kind = "UnrecognizedSyntax"


class ConflictingDeclaration(StatementError):
    kind = "ConflictingDeclaration"


class DirectiveError(YumlError):
    """Invalid or missing `// {key:value}` directive."""


class RenderError(YumlError):
    """The external Graphviz binary could not produce an image."""
