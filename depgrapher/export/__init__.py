"""Graph writers (Dot / any line syntax, JSON)."""

from depgrapher.export.dot import export_dot, write_dot, write_graph
from depgrapher.export.json import export_json, graph_to_node_link, write_json

__all__ = [
    "export_dot",
    "export_json",
    "graph_to_node_link",
    "write_dot",
    "write_graph",
    "write_json",
]
