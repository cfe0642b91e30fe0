"""Text input: logical line splitting and the ingestion engine."""

from depgrapher.parsers.engine import (
    Declaration,
    GraphIngestor,
    apply_declaration,
    find_declaration,
    ingest,
    ingest_files,
    split_declaration,
)
from depgrapher.parsers.lines import iter_logical_lines, iter_stream_lines, open_inputs

__all__ = [
    "Declaration",
    "GraphIngestor",
    "apply_declaration",
    "find_declaration",
    "ingest",
    "ingest_files",
    "iter_logical_lines",
    "iter_stream_lines",
    "open_inputs",
    "split_declaration",
]
