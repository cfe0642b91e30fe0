"""Graph backend abstraction layer.

Wraps NetworkX for easy backend replacement in the future.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, Optional

import networkx as nx

logger = logging.getLogger("depgrapher.graph.backend")


class GraphBackend:
    """Graph storage wrapping a NetworkX DiGraph.

    Node keys are node names; the node object itself is kept in the
    ``node`` attribute. A DiGraph stores each (source, target) pair once,
    so duplicate edges collapse into one.
    """

    NODE_ATTR = "node"

    def __init__(self, graph: Optional[nx.DiGraph] = None) -> None:
        """Initialize backend with an empty (or provided) DiGraph."""
        self._graph = graph if graph is not None else nx.DiGraph()

    @property
    def native_graph(self) -> nx.DiGraph:
        """Get native NetworkX graph for advanced operations."""
        return self._graph

    def add_node(self, name: str, node: Any) -> None:
        self._graph.add_node(name, **{self.NODE_ATTR: node})

    def add_edge(self, source: str, target: str) -> None:
        """Add edge between two existing nodes."""
        self._graph.add_edge(source, target)

    def has_node(self, name: str) -> bool:
        return self._graph.has_node(name)

    def has_edge(self, source: str, target: str) -> bool:
        return self._graph.has_edge(source, target)

    def get_node(self, name: str) -> Optional[Any]:
        """Get the stored node object, or None if not found."""
        data: Optional[Dict[str, Any]] = self._graph.nodes.get(name)
        if data is None:
            return None
        return data.get(self.NODE_ATTR)

    def node_objects(self) -> Iterator[Any]:
        """Iterate stored node objects in insertion order."""
        for _, node in self._graph.nodes(data=self.NODE_ATTR):
            yield node

    def edges(self) -> Iterable:
        return self._graph.edges()

    def remove_node(self, name: str) -> bool:
        """Remove a node and every incident edge.

        Returns:
            bool: False if the node was not present.
        """
        if not self._graph.has_node(name):
            return False
        self._graph.remove_node(name)
        return True

    def remove_edge(self, source: str, target: str) -> bool:
        if not self._graph.has_edge(source, target):
            return False
        self._graph.remove_edge(source, target)
        return True

    def successors(self, name: str) -> Iterable[str]:
        return self._graph.successors(name)

    def predecessors(self, name: str) -> Iterable[str]:
        return self._graph.predecessors(name)

    def in_degree(self, name: str) -> int:
        return self._graph.in_degree(name)

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def copy(self) -> "GraphBackend":
        """Copy the containers; node objects are shared."""
        logger.debug("Copying graph backend with %d nodes", self._graph.number_of_nodes())
        return GraphBackend(self._graph.copy())
