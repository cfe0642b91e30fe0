"""Syntax definitions and the selector parser."""

from depgrapher.syntax.definition import (
    DOT,
    IGNORE_FIELD,
    MAKE_CALL,
    MAKEFILE,
    PRESETS,
    Syntax,
    lookup_preset,
)
from depgrapher.syntax.selector import parse_syntaxes

__all__ = [
    "DOT",
    "IGNORE_FIELD",
    "MAKE_CALL",
    "MAKEFILE",
    "PRESETS",
    "Syntax",
    "lookup_preset",
    "parse_syntaxes",
]
