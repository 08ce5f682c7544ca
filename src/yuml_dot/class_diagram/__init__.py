from __future__ import annotations

from .parser import (
    CLASS_SPANS,
    HEAD_MARKERS,
    TAIL_MARKERS,
    parse_connector,
    tokenize_class_statement,
)

__all__ = [
    "CLASS_SPANS",
    "HEAD_MARKERS",
    "TAIL_MARKERS",
    "parse_connector",
    "tokenize_class_statement",
]
