"""Node identity.

Nodes are opaque values identified solely by their name. Any object with
a stable, cheap ``name`` attribute can be stored in a DependencyGraph;
nodes discovered during ingestion are SimpleNode instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class Node(Protocol):
    """Anything with a unique, stable name."""

    @property
    def name(self) -> str: ...


@dataclass(frozen=True)
class SimpleNode:
    """Plain named node created by the graph input methods."""

    name: str

    def __str__(self) -> str:
        return self.name


NodeLike = Union[Node, str]


def as_node(value: NodeLike) -> Node:
    """Coerce a bare name into a SimpleNode, passing nodes through."""
    if isinstance(value, str):
        return SimpleNode(value)
    return value


def node_name(value: NodeLike) -> str:
    if isinstance(value, str):
        return value
    return value.name
