from __future__ import annotations

from .parser import ACTIVITY_SPANS, tokenize_activity_statement

__all__ = [
    "ACTIVITY_SPANS",
    "tokenize_activity_statement",
]
