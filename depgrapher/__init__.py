"""Depgrapher - dependency graphs from Makefile-like text.

Builds an in-memory directed dependency graph from line-oriented
declarations and renders it as an ASCII tree or exports it as Dot.
"""

from depgrapher.errors import (
    DepGrapherError,
    IngestionError,
    MissingNodeError,
    SyntaxConfigError,
)
from depgrapher.export.dot import write_dot, write_graph
from depgrapher.graph import DependencyGraph, SimpleNode
from depgrapher.parsers import GraphIngestor, ingest, ingest_files
from depgrapher.render import render_full_tree, render_tree
from depgrapher.syntax import DOT, MAKE_CALL, MAKEFILE, Syntax, parse_syntaxes

__version__ = "0.1.0"

__all__ = [
    "DOT",
    "DepGrapherError",
    "DependencyGraph",
    "GraphIngestor",
    "IngestionError",
    "MAKEFILE",
    "MAKE_CALL",
    "MissingNodeError",
    "SimpleNode",
    "Syntax",
    "SyntaxConfigError",
    "ingest",
    "ingest_files",
    "parse_syntaxes",
    "render_full_tree",
    "render_tree",
    "write_dot",
    "write_graph",
]
