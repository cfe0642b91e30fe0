"""ASCII dependency tree rendering.

Each node is laid out as an immutable Block: a list of equal-width text
rows plus the column of the node's name. Blocks are composed bottom-up:

     a          <- name row, centred over the children
    / |         <- connector row
   V  V         <- arrow-head row
   b  c         <- children blocks side by side
   |   |
   V   V
   d  &d        <- second visit of d, not expanded again

Connectors point down-left (``/``), down (``|``) or down-right (``\\``)
depending on where the child's name sits relative to the parent's.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

import networkx as nx

from depgrapher.errors import MissingNodeError
from depgrapher.graph.manager import DependencyGraph
from depgrapher.graph.node import Node, NodeLike, SimpleNode, node_name

logger = logging.getLogger("depgrapher.render.tree")

EMPTY_GRAPH = "{empty graph}"
DEFAULT_SHARED_MARKER = "&"
DEFAULT_SYNTHETIC_ROOT = "_all"

# rows above the children: name, connectors, arrow heads
_HEADER_ROWS = 3


@dataclass(frozen=True)
class Block:
    """Rendered subtree.

    Attributes:
        lines: Rows of exactly ``width`` characters, top row first.
        width: Column width of the subtree.
        anchor: Column of the centre of the node's name field.
    """

    lines: Tuple[str, ...]
    width: int
    anchor: int

    @classmethod
    def leaf(cls, label: str) -> "Block":
        return cls((label,), len(label), len(label) // 2)


@dataclass
class _RenderSession:
    """State of a single render call."""

    graph: DependencyGraph
    shared_marker: str
    seen: Set[str] = field(default_factory=set)


def _put(row: List[str], column: int, glyph: str) -> None:
    if 0 <= column < len(row):
        row[column] = glyph


def _draw_connectors(
    width: int, field_start: int, field_len: int, midpoints: Sequence[int]
) -> Tuple[str, str]:
    """Draw the connector and arrow-head rows for a parent field."""
    line1 = [" "] * width
    line2 = [" "] * width
    for mid in midpoints:
        if mid < field_start:
            _put(line1, mid + 1, "/")
        elif mid < field_start + field_len:
            _put(line1, mid, "|")
        else:
            _put(line1, mid - 1, "\\")
        _put(line2, mid, "V")
    return "".join(line1), "".join(line2)


def _concat_horizontally(blocks: Sequence[Block]) -> Tuple[List[str], int, List[int]]:
    """Place blocks side by side.

    Returns:
        Rows, total width and the column offset of each block.
    """
    if len(blocks) == 1:
        return list(blocks[0].lines), blocks[0].width, [0]
    offsets = []
    width = 0
    for block in blocks:
        offsets.append(width)
        width += block.width
    height = max(len(block.lines) for block in blocks)
    rows = []
    for index in range(height):
        rows.append(
            "".join(
                block.lines[index] if index < len(block.lines) else " " * block.width
                for block in blocks
            )
        )
    return rows, width, offsets


def _dedent(lines: Sequence[str]) -> List[str]:
    """Drop the blank left margin shared by all non-empty rows."""
    margins = [len(line) - len(line.lstrip(" ")) for line in lines if line.strip()]
    cut = min(margins, default=0)
    return [line[cut:] for line in lines]


@dataclass
class _Frame:
    """Internal node whose children are still being laid out."""

    label: str
    dependencies: List[Node]
    children: List[Block] = field(default_factory=list)


def _combine(label: str, children: Sequence[Block]) -> Block:
    """Place a node's name field and connectors above its child blocks."""
    child_rows, deps_width, offsets = _concat_horizontally(children)
    midpoints = [offset + child.anchor for offset, child in zip(offsets, children)]

    if len(label) > deps_width:
        # name is wider than its children: centre them under it
        shift = (len(label) - deps_width) // 2
        width = len(label)
        child_rows = [
            " " * shift + row + " " * (width - deps_width - shift)
            for row in child_rows
        ]
        midpoints = [mid + shift for mid in midpoints]
        field_start = 0
    else:
        width = deps_width
        field_start = (deps_width - len(label)) // 2

    name_row = " " * field_start + label + " " * (width - field_start - len(label))
    connectors, heads = _draw_connectors(width, field_start, len(label), midpoints)
    return Block(
        lines=(name_row, connectors, heads, *child_rows),
        width=width,
        anchor=field_start + len(label) // 2,
    )


class TreeRenderer:
    """Lays out dependency trees as text rows.

    Attributes:
        shared_marker: Prefix marking a node already drawn in this render.
        synthetic_root: Name of the root added for whole-graph renders.
    """

    def __init__(
        self,
        shared_marker: str = DEFAULT_SHARED_MARKER,
        synthetic_root: str = DEFAULT_SYNTHETIC_ROOT,
    ) -> None:
        self.shared_marker = shared_marker
        self.synthetic_root = synthetic_root

    def layout(self, graph: DependencyGraph, root: NodeLike) -> Block:
        """Lay out the tree below ``root`` as a Block.

        Raises:
            ValueError: If ``root`` is None.
            MissingNodeError: If ``root`` is not in ``graph``.
        """
        if root is None:
            raise ValueError("render root must not be None")
        name = node_name(root)
        with graph.locked():
            if not graph.has_node(name):
                raise MissingNodeError(name, "render")
            session = _RenderSession(graph=graph, shared_marker=self.shared_marker)
            return self._layout_node(session, name)

    def _layout_node(self, session: _RenderSession, root_name: str) -> Block:
        """Post-order layout driven by an explicit stack of frames.

        Nodes are entered in the same depth-first order as a recursive
        walk, so revisit markers land on the same occurrences. Depth is
        bounded by memory, not by the interpreter's recursion limit.
        """
        stack: List[_Frame] = []
        block = self._enter(session, root_name, stack)
        while stack:
            frame = stack[-1]
            if block is not None:
                frame.children.append(block)
            if len(frame.children) < len(frame.dependencies):
                next_name = frame.dependencies[len(frame.children)].name
                block = self._enter(session, next_name, stack)
            else:
                stack.pop()
                block = _combine(frame.label, frame.children)
        return block

    def _enter(
        self, session: _RenderSession, name: str, stack: List[_Frame]
    ) -> Optional[Block]:
        """Return a leaf Block, or push a frame for ``name`` and return None."""
        if name in session.seen:
            return Block.leaf(f" {session.shared_marker}{name} ")
        session.seen.add(name)

        label = f" {name} "
        dependencies = session.graph.get_dependencies(name)
        if not dependencies:
            return Block.leaf(label)
        stack.append(_Frame(label=label, dependencies=dependencies))
        return None

    def render(self, graph: DependencyGraph, root: NodeLike) -> List[str]:
        """Render the dependency tree of ``root``, top row first."""
        block = self.layout(graph, root)
        return [line.rstrip() for line in block.lines]

    def render_full(self, graph: DependencyGraph) -> List[str]:
        """Render every tree of the graph below a synthetic root.

        The synthetic root depends on every node without dependants, plus
        one node of each cycle not reachable from those. Its own rows are
        dropped from the output.
        """
        if graph.node_count() == 0:
            return [EMPTY_GRAPH]

        full_graph, root_name = self._with_synthetic_root(graph)
        block = self.layout(full_graph, root_name)
        lines = [line.rstrip() for line in block.lines[_HEADER_ROWS:]]
        return _dedent(lines)

    def _with_synthetic_root(self, graph: DependencyGraph) -> Tuple[DependencyGraph, str]:
        full_graph = graph.copy()
        root_name = self.synthetic_root
        while full_graph.has_node(root_name):
            root_name = f"_{root_name}"
        root = SimpleNode(root_name)
        full_graph.add_nodes(root)

        nodes = graph.get_nodes()
        for node in nodes:
            if graph.in_degree(node.name) == 0:
                full_graph.add_edge_and_nodes(root, node)

        native = full_graph.backend.native_graph
        reachable = nx.descendants(native, root_name)
        for node in nodes:
            if node.name not in reachable:
                full_graph.add_edge_and_nodes(root, node)
                reachable |= nx.descendants(native, node.name) | {node.name}
                logger.debug("Attached unreachable node %s to synthetic root", node.name)
        return full_graph, root_name


def render_tree(
    graph: DependencyGraph,
    root: Optional[NodeLike],
    shared_marker: str = DEFAULT_SHARED_MARKER,
) -> List[str]:
    """Render the dependency tree of one node."""
    return TreeRenderer(shared_marker=shared_marker).render(graph, root)


def render_full_tree(
    graph: DependencyGraph,
    shared_marker: str = DEFAULT_SHARED_MARKER,
    synthetic_root: str = DEFAULT_SYNTHETIC_ROOT,
) -> List[str]:
    """Render the dependency trees of the whole graph."""
    renderer = TreeRenderer(shared_marker=shared_marker, synthetic_root=synthetic_root)
    return renderer.render_full(graph)


__all__ = [
    "Block",
    "EMPTY_GRAPH",
    "TreeRenderer",
    "render_full_tree",
    "render_tree",
]
