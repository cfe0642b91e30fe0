"""Line-oriented syntax definitions.

A Syntax describes how a single line of text encodes dependency edges:

    <GraphPrefix>            opens a block (e.g. ``digraph{``)
    <EdgePrefix> sources <EdgeInfix> targets <EdgeSuffix>
    <GraphSuffix>            closes the block (e.g. ``}``)

Every edge declaration is assumed to fit on one logical line.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from typing import Dict, List, Tuple

# Marks a field that does not apply to a syntax.
IGNORE_FIELD = ""


@dataclass(frozen=True)
class Syntax:
    """Immutable description of one statement shape.

    Field order matches the inline selector format
    ``{"GraphPrefix","EdgePrefix",...,"GraphSuffix",bool}``.
    """

    graph_prefix: str = IGNORE_FIELD
    edge_prefix: str = IGNORE_FIELD
    source_delimiter: str = IGNORE_FIELD
    edge_infix: str = IGNORE_FIELD
    target_delimiter: str = IGNORE_FIELD
    edge_suffix: str = IGNORE_FIELD
    graph_suffix: str = IGNORE_FIELD
    strip_whitespace: bool = True

    @classmethod
    def from_fields(cls, values: List[str], strip_whitespace: bool = True) -> "Syntax":
        """Build a Syntax from the seven string fields in declaration order."""
        return cls(*values, strip_whitespace=strip_whitespace)

    @property
    def always_active(self) -> bool:
        """True for block-less syntaxes such as Makefiles."""
        return self.graph_prefix == IGNORE_FIELD

    def as_tuple(self) -> Tuple:
        return astuple(self)


STRING_FIELD_COUNT = len(fields(Syntax)) - 1


MAKEFILE = Syntax(
    graph_prefix="",
    edge_prefix="",
    source_delimiter=" ",
    edge_infix=":",
    target_delimiter=" ",
    edge_suffix="",
    graph_suffix="",
    strip_whitespace=True,
)

DOT = Syntax(
    graph_prefix="digraph{",
    edge_prefix="",
    source_delimiter="",
    edge_infix="->",
    target_delimiter="",
    edge_suffix=";",
    graph_suffix="}",
    strip_whitespace=True,
)

# Build-system macro calls: one shape per macro.
MAKE_CALL: Tuple[Syntax, ...] = (
    Syntax(
        graph_prefix="",
        edge_prefix="$(call DEPEND_ALL,",
        source_delimiter="",
        edge_infix=",",
        target_delimiter=",",
        edge_suffix=")",
        graph_suffix="",
        strip_whitespace=True,
    ),
    Syntax(
        graph_prefix="",
        edge_prefix="$(call ALL_SPECS,",
        source_delimiter=",",
        edge_infix="):",
        target_delimiter=" ",
        edge_suffix="",
        graph_suffix="",
        strip_whitespace=True,
    ),
)

# Lower-cased alias -> syntaxes it expands to.
PRESETS: Dict[str, Tuple[Syntax, ...]] = {
    "makefile": (MAKEFILE,),
    "make": (MAKEFILE,),
    "m": (MAKEFILE,),
    "makecall": MAKE_CALL,
    "c": MAKE_CALL,
    "dot": (DOT,),
    "d": (DOT,),
}


def lookup_preset(name: str) -> Tuple[Syntax, ...]:
    """Return the syntaxes registered under a preset alias.

    Raises:
        KeyError: If the alias is unknown.
    """
    return PRESETS[name.strip().lower()]


__all__ = [
    "DOT",
    "IGNORE_FIELD",
    "MAKEFILE",
    "MAKE_CALL",
    "PRESETS",
    "STRING_FIELD_COUNT",
    "Syntax",
    "lookup_preset",
]
