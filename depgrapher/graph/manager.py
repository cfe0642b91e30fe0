"""Dependency graph.

DependencyGraph owns the node and edge collections built from the input.
An edge ``source -> target`` means "source depends on target". Every
edge endpoint is always a registered node.

Two edge-insertion contracts exist side by side:
- ``add_edge`` is strict: both endpoints must already be registered.
- ``add_edge_and_nodes`` is lenient: missing endpoints are registered.
"""

import contextlib
import logging
import threading
from collections import deque
from typing import Deque, Iterator, List, Optional, Set, Tuple

from depgrapher.errors import MissingNodeError
from depgrapher.graph.backend import GraphBackend
from depgrapher.graph.node import Node, NodeLike, as_node

logger = logging.getLogger("depgrapher.graph.manager")


class DependencyGraph:
    """In-memory directed dependency graph.

    A synced graph (the default) guards every operation with a re-entrant
    lock so worker threads may add edges concurrently. An unsynced graph
    skips locking for single-threaded use.

    Duplicate edges are stored once.
    """

    def __init__(
        self,
        node_capacity: Optional[int] = None,
        edge_capacity: Optional[int] = None,
        synced: bool = True,
    ) -> None:
        """Initialize an empty graph.

        Args:
            node_capacity: Expected number of nodes. Advisory only; the
                hash-based storage grows on demand.
            edge_capacity: Expected number of edges. Advisory only.
            synced: Guard operations with a lock.
        """
        self.node_capacity = node_capacity
        self.edge_capacity = edge_capacity
        self.synced = synced
        self._backend = GraphBackend()
        self._lock = threading.RLock() if synced else None

    @property
    def backend(self) -> GraphBackend:
        """Return the underlying graph backend."""
        return self._backend

    def locked(self):
        """Context manager holding the graph lock (no-op when unsynced).

        The lock is re-entrant, so graph methods may be called while it
        is held.
        """
        if self._lock is None:
            return contextlib.nullcontext()
        return self._lock

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: NodeLike, *target_names: str) -> None:
        """Register a node and add edges to already registered targets.

        Args:
            node: Node (or bare name) to register.
            *target_names: Names of existing nodes the new node depends on.

        Raises:
            MissingNodeError: If a target name is not registered. No
                change is made to the graph in that case.
        """
        node = as_node(node)
        with self.locked():
            for name in target_names:
                if name != node.name and not self._backend.has_node(name):
                    raise MissingNodeError(name, "add_node")
            if not self._backend.has_node(node.name):
                self._backend.add_node(node.name, node)
            for name in target_names:
                self._backend.add_edge(node.name, name)

    def add_nodes(self, *nodes: NodeLike) -> None:
        """Register several nodes without edges."""
        with self.locked():
            for node in nodes:
                node = as_node(node)
                if not self._backend.has_node(node.name):
                    self._backend.add_node(node.name, node)

    def get_node(self, name: str) -> Optional[Node]:
        """Return the node with the given name, or None."""
        with self.locked():
            return self._backend.get_node(name)

    def has_node(self, name: str) -> bool:
        with self.locked():
            return self._backend.has_node(name)

    def get_nodes(self) -> List[Node]:
        """Return all nodes in registration order (empty list if none)."""
        with self.locked():
            return list(self._backend.node_objects())

    def remove_node(self, name: str) -> bool:
        """Remove a node together with all edges from or to it.

        Returns:
            bool: False if the graph had no node with that name.
        """
        with self.locked():
            removed = self._backend.remove_node(name)
        if removed:
            logger.debug("Removed node: %s", name)
        return removed

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(self, source: str, target: str) -> None:
        """Add an edge between two registered nodes.

        Raises:
            MissingNodeError: If either endpoint is not registered.
        """
        with self.locked():
            for name in (source, target):
                if not self._backend.has_node(name):
                    raise MissingNodeError(name, "add_edge")
            self._backend.add_edge(source, target)

    def add_edge_and_nodes(self, source: NodeLike, target: NodeLike) -> None:
        """Add an edge, registering either endpoint if it is missing."""
        source = as_node(source)
        target = as_node(target)
        with self.locked():
            if not self._backend.has_node(source.name):
                self._backend.add_node(source.name, source)
            if not self._backend.has_node(target.name):
                self._backend.add_node(target.name, target)
            self._backend.add_edge(source.name, target.name)
        logger.debug("Added edge: %s -> %s", source.name, target.name)

    def has_edge(self, source: str, target: str) -> bool:
        with self.locked():
            return self._backend.has_edge(source, target)

    def remove_edge(self, source: str, target: str) -> bool:
        """Remove the edge from source to target.

        Returns:
            bool: False if the graph had no such edge.
        """
        with self.locked():
            return self._backend.remove_edge(source, target)

    def edges(self) -> List[Tuple[str, str]]:
        """Return all edges as (source, target) name pairs."""
        with self.locked():
            return list(self._backend.edges())

    def get_dependencies(self, name: str) -> List[Node]:
        """Return the targets of every edge whose source is ``name``.

        Unknown names yield an empty list.
        """
        with self.locked():
            if not self._backend.has_node(name):
                return []
            return [self._backend.get_node(t) for t in self._backend.successors(name)]

    def get_dependants(self, name: str) -> List[Node]:
        """Return the sources of every edge whose target is ``name``."""
        with self.locked():
            if not self._backend.has_node(name):
                return []
            return [self._backend.get_node(s) for s in self._backend.predecessors(name)]

    def in_degree(self, name: str) -> int:
        with self.locked():
            return self._backend.in_degree(name)

    def node_count(self) -> int:
        with self.locked():
            return self._backend.node_count()

    def edge_count(self) -> int:
        with self.locked():
            return self._backend.edge_count()

    # ------------------------------------------------------------------
    # Derived graphs
    # ------------------------------------------------------------------

    def copy(self) -> "DependencyGraph":
        """Return an independent copy of the node and edge collections.

        Node objects are shared, they are immutable identities.
        """
        result = DependencyGraph(
            node_capacity=self.node_capacity,
            edge_capacity=self.edge_capacity,
            synced=self.synced,
        )
        with self.locked():
            result._backend = self._backend.copy()
        return result

    def get_dependency_graph(self, root_name: str) -> Optional["DependencyGraph"]:
        """Build the subgraph reachable from ``root_name``.

        Walks outgoing edges breadth-first. Each reached node is added
        once; reaching an already included node adds the edge but does not
        walk past it again, so cycles terminate.

        Returns:
            Optional[DependencyGraph]: None if ``root_name`` is unknown.
        """
        with self.locked():
            root = self._backend.get_node(root_name)
            if root is None:
                return None

            result = DependencyGraph(synced=self.synced)
            result.add_nodes(root)
            visited: Set[str] = {root_name}
            queue: Deque[str] = deque([root_name])

            while queue:
                current = queue.popleft()
                for target in self._backend.successors(current):
                    result.add_edge_and_nodes(
                        self._backend.get_node(current), self._backend.get_node(target)
                    )
                    if target not in visited:
                        visited.add(target)
                        queue.append(target)

        logger.debug(
            "Dependency graph of %s: %d nodes, %d edges",
            root_name,
            result.node_count(),
            result.edge_count(),
        )
        return result

    def get_summary(self) -> dict:
        return {
            "node_count": self.node_count(),
            "edge_count": self.edge_count(),
            "synced": self.synced,
        }

    def __iter__(self) -> Iterator[Node]:
        return iter(self.get_nodes())

    def __len__(self) -> int:
        return self.node_count()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_node(name)

    def __str__(self) -> str:
        """Simple edge listing, e.g. ``a => b; a => c; ``."""
        with self.locked():
            if self._backend.node_count() == 0:
                return "{empty graph}"
            return "".join(f"{s} => {t}; " for s, t in self._backend.edges())
