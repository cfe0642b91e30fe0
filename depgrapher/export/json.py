"""JSON export using the networkx node-link format."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, TextIO

import networkx as nx
from networkx.readwrite import node_link_data

from depgrapher.graph.manager import DependencyGraph

logger = logging.getLogger("depgrapher.export.json")


def graph_to_node_link(graph: DependencyGraph) -> Dict[str, Any]:
    """Node-link data with node names only (node objects are not serialised)."""
    with graph.locked():
        plain = nx.DiGraph()
        plain.add_nodes_from(node.name for node in graph.get_nodes())
        plain.add_edges_from(graph.edges())
    return node_link_data(plain, edges="edges")


def write_json(graph: DependencyGraph, writer: TextIO) -> None:
    json.dump(graph_to_node_link(graph), writer, indent=2, ensure_ascii=False)
    writer.write("\n")


def export_json(graph: DependencyGraph, output_path: Path) -> None:
    """Export graph to JSON format.

    Args:
        graph: Graph to export.
        output_path: Output file path.
    """
    logger.info("Exporting graph to JSON: %s", output_path)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        write_json(graph, f)

    logger.info("JSON export completed: %d nodes, %d edges",
                graph.node_count(), graph.edge_count())
