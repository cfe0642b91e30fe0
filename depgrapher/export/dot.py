"""Graph writer: serialise a graph with a line-oriented syntax.

Only edges are written. A node without dependencies is never emitted on
its own, so isolated nodes are lost in the output. Names are always
quoted, so delimiters and infixes inside a name survive a re-read. Graph
prefix and suffix markers inside a name still toggle block syntaxes.
"""

import logging
from pathlib import Path
from typing import TextIO

from depgrapher.graph.manager import DependencyGraph
from depgrapher.syntax.definition import DOT, Syntax

logger = logging.getLogger("depgrapher.export.dot")


def _quote(name: str) -> str:
    """Double-quote a name, backslash-escaping ``\\`` and ``"``."""
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def write_graph(graph: DependencyGraph, writer: TextIO, syntax: Syntax) -> int:
    """Write every node with dependencies as one declaration.

    Syntaxes without a target delimiter (one target per statement, like
    Dot) repeat the full statement for each target.

    Args:
        graph: Graph to write.
        writer: Text sink.
        syntax: Syntax to emit.

    Returns:
        int: Number of edges written.
    """
    edge_count = 0
    with graph.locked():
        writer.write(syntax.graph_prefix + "\n")
        for node in graph.get_nodes():
            dependencies = graph.get_dependencies(node.name)
            if not dependencies:
                continue
            header = syntax.edge_prefix + _quote(node.name) + syntax.edge_infix
            if syntax.target_delimiter:
                targets = syntax.target_delimiter.join(_quote(d.name) for d in dependencies)
                writer.write(header + targets + syntax.edge_suffix + "\n")
            else:
                for dep in dependencies:
                    writer.write(header + _quote(dep.name) + syntax.edge_suffix + "\n")
            edge_count += len(dependencies)
        writer.write(syntax.graph_suffix + "\n")
    return edge_count


def write_dot(graph: DependencyGraph, writer: TextIO) -> int:
    """Write the graph in Dot language syntax."""
    return write_graph(graph, writer, DOT)


def export_dot(graph: DependencyGraph, output_path: Path) -> None:
    """Export graph to a DOT file.

    Args:
        graph: Graph to export.
        output_path: Output file path.
    """
    logger.info("Exporting graph to DOT: %s", output_path)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        edges = write_dot(graph, f)

    logger.info("DOT export completed: %d nodes, %d edges",
                graph.node_count(), edges)
