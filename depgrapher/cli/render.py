"""Render command implementation."""

# The command guards against unexpected exceptions to report failures cleanly.

import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from depgrapher.config import GrapherConfig, load_config
from depgrapher.errors import ConfigError, IngestionError
from depgrapher.export.dot import export_dot, write_dot
from depgrapher.export.json import export_json, write_json
from depgrapher.graph.manager import DependencyGraph
from depgrapher.parsers.engine import GraphIngestor
from depgrapher.parsers.lines import STDIN_SENTINEL, iter_stream_lines, open_inputs
from depgrapher.render.tree import render_full_tree, render_tree
from depgrapher.render.wrap import detect_terminal_width, wrap_lines
from depgrapher.syntax.selector import parse_syntaxes

logger = logging.getLogger("depgrapher.cli.render")

STDOUT_SENTINEL = "stdout"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def _resolve_config(args) -> GrapherConfig:
    return load_config(
        getattr(args, "config", None),
        syntax=getattr(args, "syntax", None),
        workers=getattr(args, "workers", None),
    )


def _write_export(graph: DependencyGraph, stream: TextIO, export_format: str) -> None:
    if export_format == "json":
        write_json(graph, stream)
    else:
        write_dot(graph, stream)


def _tree_lines(
    graph: DependencyGraph, node: Optional[str], config: GrapherConfig
) -> List[str]:
    if node is None:
        lines = render_full_tree(
            graph,
            shared_marker=config.shared_marker,
            synthetic_root=config.synthetic_root,
        )
    else:
        lines = render_tree(graph, node, shared_marker=config.shared_marker)

    if not config.wrap:
        return lines
    width = config.terminal_width
    if width is None:
        width = detect_terminal_width()
    return wrap_lines(lines, width)


def render_command(args) -> int:
    """Execute the render command.

    Args:
        args: Parsed command-line arguments containing:
            - files: Input paths (``-`` or none for standard input)
            - syntax: Syntax selector override (optional)
            - outfile: ``stdout`` or a path to export to (optional)
            - node: Root node name (optional, whole graph otherwise)
            - format: Export format, ``dot`` or ``json``
            - config: Config file path, .toml or .json (optional)
            - workers: Ingestion worker override (optional)

    Returns:
        int: Exit code (0 ok, 1 failure, 2 configuration error).
    """
    try:
        config = _resolve_config(args)
        syntaxes = parse_syntaxes(config.syntax)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_CONFIG_ERROR

    files = list(getattr(args, "files", None) or [STDIN_SENTINEL])
    outfile = getattr(args, "outfile", None)
    node = getattr(args, "node", None)
    export_format = getattr(args, "format", None) or "dot"

    logger.info("Syntax: %s", config.syntax)
    logger.info("Inputs: %s", ", ".join(files))

    try:
        ingestor = GraphIngestor(
            syntaxes, max_workers=config.workers, queue_size=config.queue_size
        )
        with open_inputs(files, encoding=config.encoding) as streams:
            graph = ingestor.ingest(iter_stream_lines(streams))

        summary = graph.get_summary()
        logger.info("Graph built: %d nodes, %d edges", summary["node_count"], summary["edge_count"])
        if summary["node_count"] == 0:
            logger.warning("No dependencies found in input")

        if node:
            subgraph = graph.get_dependency_graph(node)
            if subgraph is None:
                logger.error("Node not found: %s", node)
                return EXIT_FAILURE
        else:
            subgraph = graph

        if outfile == STDOUT_SENTINEL:
            _write_export(subgraph, sys.stdout, export_format)
        elif outfile:
            if export_format == "json":
                export_json(subgraph, Path(outfile))
            else:
                export_dot(subgraph, Path(outfile))
        else:
            for line in _tree_lines(subgraph, node or None, config):
                sys.stdout.write(line + "\n")

        return EXIT_OK

    except IngestionError as e:
        logger.error("Ingestion failed: %s", e)
        return EXIT_FAILURE
    except OSError as e:
        logger.error("I/O error: %s", e)
        return EXIT_FAILURE
    except Exception as e:
        logger.error("Render failed: %s", e, exc_info=True)
        return EXIT_FAILURE
