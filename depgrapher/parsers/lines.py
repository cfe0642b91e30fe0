"""Logical line splitting.

A physical line ending in a backslash is joined with the following line
before any syntax matching happens; the backslash itself is dropped.
Continuations may chain across any number of physical lines.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Sequence, Union

logger = logging.getLogger("depgrapher.parsers.lines")

ESCAPE_MARKER = "\\"
STDIN_SENTINEL = "-"


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_logical_lines(
    physical_lines: Iterable[str], escape: str = ESCAPE_MARKER
) -> Iterator[str]:
    """Yield logical lines, resolving trailing-backslash continuations.

    Args:
        physical_lines: Any iterable of text lines, with or without line
            endings (open files, ``io.StringIO``, lists).
        escape: Continuation marker.

    Yields:
        str: One logical line at a time, without line ending.
    """
    pending = None
    for raw in physical_lines:
        line = _strip_line_ending(raw)
        if pending is not None:
            line = pending + line
        if line.endswith(escape):
            pending = line[: -len(escape)]
            continue
        pending = None
        yield line
    if pending is not None:
        # input ended on a continuation marker
        yield pending


def iter_stream_lines(streams: Iterable[IO[str]]) -> Iterator[str]:
    """Chain the physical lines of several open text streams."""
    for stream in streams:
        yield from stream


@contextlib.contextmanager
def open_inputs(
    paths: Sequence[Union[str, Path]], encoding: str = "utf-8"
) -> Iterator[List[IO[str]]]:
    """Open every input up front and close them all on exit.

    ``-`` stands for standard input. Opening fails before any line is
    read, so a missing file never produces a partial graph.

    Raises:
        OSError: If any path cannot be opened.
    """
    with contextlib.ExitStack() as stack:
        streams: List[IO[str]] = []
        for path in paths:
            if str(path) == STDIN_SENTINEL:
                streams.append(sys.stdin)
                continue
            logger.debug("Opening input file: %s", path)
            streams.append(stack.enter_context(open(path, "r", encoding=encoding)))
        yield streams


__all__ = [
    "ESCAPE_MARKER",
    "STDIN_SENTINEL",
    "iter_logical_lines",
    "iter_stream_lines",
    "open_inputs",
]
