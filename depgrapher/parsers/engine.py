"""Ingestion engine: text lines in, dependency graph out.

Scanning is split in two stages:
1. Declaration extraction runs on the calling thread. It tracks which
   syntaxes are active (block formats such as Dot are only active between
   their graph prefix and suffix) and cuts the declaration body out of
   each line. The first matching syntax wins.
2. Splitting a body into source and target names and inserting the
   resulting edges runs on a LineWorkerPool. Edge insertion is guarded
   by the graph's own lock.

All dispatched work is drained before the graph is returned.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from depgrapher.errors import IngestionError
from depgrapher.graph.manager import DependencyGraph
from depgrapher.graph.node import SimpleNode
from depgrapher.parsers.lines import iter_logical_lines, iter_stream_lines, open_inputs
from depgrapher.runtime.worker import LineWorkerPool
from depgrapher.syntax.definition import Syntax

logger = logging.getLogger("depgrapher.parsers.engine")

_ESCAPE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class Declaration:
    """Declaration body cut out of one logical line."""

    body: str
    syntax: Syntax


def _find_unquoted(text: str, token: str) -> int:
    """Index of the first ``token`` outside double quotes, or -1.

    Inside quotes a backslash escapes the next character. An empty token
    is found at index 0.
    """
    if not token:
        return 0
    quoted = False
    index = 0
    while index < len(text):
        char = text[index]
        if quoted and char == "\\":
            index += 2
            continue
        if char == '"':
            quoted = not quoted
        elif not quoted and text.startswith(token, index):
            return index
        index += 1
    return -1


def _split_unquoted(text: str, delimiter: str) -> List[str]:
    if not delimiter:
        return [text]
    parts = []
    while True:
        index = _find_unquoted(text, delimiter)
        if index < 0:
            parts.append(text)
            return parts
        parts.append(text[:index])
        text = text[index + len(delimiter):]


def find_declaration(line: str, syntax: Syntax) -> Optional[str]:
    """Return the declaration body of ``line`` for ``syntax``, or None.

    The body lies between the end of the first edge prefix and the start
    of the last edge suffix, and must contain the edge infix outside of
    any quoted name. Empty prefix/suffix markers match at the start/end
    of the line.
    """
    prefix_index = line.find(syntax.edge_prefix)
    if prefix_index < 0:
        return None
    body_start = prefix_index + len(syntax.edge_prefix)
    suffix_index = line.rfind(syntax.edge_suffix)
    if suffix_index < body_start:
        return None
    body = line[body_start:suffix_index]
    if _find_unquoted(body, syntax.edge_infix) < 0:
        return None
    return body


def _unquote(token: str) -> str:
    """Strip surrounding double quotes and resolve backslash escapes."""
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return _ESCAPE.sub(r"\1", token[1:-1])
    return token


def _split_names(text: str, delimiter: str, strip_whitespace: bool) -> List[str]:
    names = []
    for part in _split_unquoted(text, delimiter):
        if strip_whitespace:
            part = part.strip()
        part = _unquote(part)
        if part:
            names.append(part)
    return names


def split_declaration(body: str, syntax: Syntax) -> Tuple[List[str], List[str]]:
    """Split a declaration body into source and target names.

    Everything before the first edge infix is the source group, everything
    after it the target group. Delimiters and the infix inside a quoted
    name do not split it. Empty names are dropped.
    """
    infix_index = _find_unquoted(body, syntax.edge_infix)
    if infix_index < 0:
        return [], []
    left = body[:infix_index]
    right = body[infix_index + len(syntax.edge_infix):]
    return (
        _split_names(left, syntax.source_delimiter, syntax.strip_whitespace),
        _split_names(right, syntax.target_delimiter, syntax.strip_whitespace),
    )


def apply_declaration(graph: DependencyGraph, declaration: Declaration) -> int:
    """Add every source x target edge of a declaration to ``graph``.

    Returns:
        int: Number of edges inserted (duplicates included).
    """
    sources, targets = split_declaration(declaration.body, declaration.syntax)
    for source in sources:
        for target in targets:
            graph.add_edge_and_nodes(SimpleNode(source), SimpleNode(target))
    return len(sources) * len(targets)


class GraphIngestor:
    """Builds a DependencyGraph from text using one or more syntaxes.

    Attributes:
        syntaxes: Candidate syntaxes in priority order.
        max_workers: Worker threads for edge insertion (None = CPU count).
        queue_size: Bound of the task queue (None = max_workers).
    """

    def __init__(
        self,
        syntaxes: Sequence[Syntax],
        max_workers: Optional[int] = None,
        queue_size: Optional[int] = None,
    ) -> None:
        if not syntaxes:
            raise ValueError("At least one syntax required")
        self.syntaxes: Tuple[Syntax, ...] = tuple(syntaxes)
        self.max_workers = max_workers
        self.queue_size = queue_size

    def scan_line(self, line: str, active: Set[int]) -> Optional[Declaration]:
        """Update the active-syntax set for ``line`` and extract a declaration.

        Args:
            line: One logical line.
            active: Indexes of currently active syntaxes; updated in place.

        Returns:
            Optional[Declaration]: Body and syntax of the first match.
        """
        for index, syntax in enumerate(self.syntaxes):
            if syntax.always_active or syntax.graph_prefix in line:
                active.add(index)
            elif index not in active:
                continue
            # closing line may still carry a declaration
            if syntax.graph_suffix and syntax.graph_suffix in line:
                active.discard(index)
            body = find_declaration(line, syntax)
            if body is not None:
                return Declaration(body, syntax)
        return None

    def iter_declarations(self, lines: Iterable[str]) -> Iterator[Declaration]:
        """Sequentially yield declarations found in ``lines``."""
        active: Set[int] = set()
        for line in iter_logical_lines(lines):
            declaration = self.scan_line(line, active)
            if declaration is not None:
                yield declaration

    def ingest(
        self, lines: Iterable[str], graph: Optional[DependencyGraph] = None
    ) -> DependencyGraph:
        """Populate a graph from physical text lines.

        Args:
            lines: Physical lines (an open file, ``io.StringIO``, a list...).
            graph: Graph to add to. A fresh synced graph by default.

        Returns:
            DependencyGraph: The populated graph.

        Raises:
            IngestionError: If reading ``lines`` fails. ``error.graph``
                holds everything dispatched before the failure.
        """
        if graph is None:
            graph = DependencyGraph()

        start_time = time.time()
        active: Set[int] = set()
        lines_read = 0
        dispatched = 0
        read_error: Optional[BaseException] = None

        logger.info("Ingesting with %d syntax(es)", len(self.syntaxes))

        with LineWorkerPool(
            lambda declaration: apply_declaration(graph, declaration),
            max_workers=self.max_workers,
            queue_size=self.queue_size,
            name="IngestWorker",
        ) as pool:
            try:
                for line in iter_logical_lines(lines):
                    lines_read += 1
                    declaration = self.scan_line(line, active)
                    if declaration is not None:
                        pool.submit(declaration)
                        dispatched += 1
            except (OSError, UnicodeDecodeError) as exc:
                read_error = exc
                logger.error("Read error after %d line(s): %s", lines_read, exc)

        if read_error is not None:
            raise IngestionError(
                f"Failed to read input after {lines_read} line(s): {read_error}",
                graph=graph,
                lines_read=lines_read,
            ) from read_error

        logger.info(
            "Ingested %d line(s), %d declaration(s): %d nodes, %d edges (%.2fs)",
            lines_read,
            dispatched,
            graph.node_count(),
            graph.edge_count(),
            time.time() - start_time,
        )
        return graph


def ingest(
    lines: Iterable[str],
    syntaxes: Sequence[Syntax],
    graph: Optional[DependencyGraph] = None,
    max_workers: Optional[int] = None,
    queue_size: Optional[int] = None,
) -> DependencyGraph:
    """Convenience wrapper around GraphIngestor.ingest."""
    ingestor = GraphIngestor(syntaxes, max_workers=max_workers, queue_size=queue_size)
    return ingestor.ingest(lines, graph)


def ingest_files(
    paths: Sequence[Union[str, Path]],
    syntaxes: Sequence[Syntax],
    max_workers: Optional[int] = None,
    queue_size: Optional[int] = None,
    encoding: str = "utf-8",
) -> DependencyGraph:
    """Read several files as one concatenated input.

    Raises:
        OSError: If a file cannot be opened (nothing has been read yet).
        IngestionError: If reading fails part-way through.
    """
    with open_inputs(paths, encoding=encoding) as streams:
        return ingest(
            iter_stream_lines(streams),
            syntaxes,
            max_workers=max_workers,
            queue_size=queue_size,
        )


__all__ = [
    "Declaration",
    "GraphIngestor",
    "apply_declaration",
    "find_declaration",
    "ingest",
    "ingest_files",
    "split_declaration",
]
