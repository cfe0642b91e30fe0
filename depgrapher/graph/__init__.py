"""Public graph API surface."""

from depgrapher.graph.backend import GraphBackend
from depgrapher.graph.manager import DependencyGraph
from depgrapher.graph.node import Node, NodeLike, SimpleNode, as_node, node_name

__all__ = [
    "DependencyGraph",
    "GraphBackend",
    "Node",
    "NodeLike",
    "SimpleNode",
    "as_node",
    "node_name",
]
