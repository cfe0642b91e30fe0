"""Exception hierarchy for depgrapher.

Errors fall into three groups:
1. Configuration errors - the syntax selector or config file is invalid.
   Reported before any input is read.
2. Ingestion errors - the input could not be read. The partially built
   graph travels with the exception.
3. Invariant violations - a strict graph operation referenced a node
   that is not registered. These indicate a caller bug.

Lookup misses (unknown node names) are not errors; they return None.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from depgrapher.graph.manager import DependencyGraph


class DepGrapherError(Exception):
    """Base class for all depgrapher errors."""
    pass


class ConfigError(DepGrapherError, ValueError):
    """Invalid configuration.

    Attributes:
        path: Config file the error came from, if any.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class SyntaxConfigError(ConfigError):
    """Invalid syntax selector string.

    Raised for unknown preset names, brace blocks that do not hold exactly
    seven quoted fields, and stray characters before an opening brace.
    """
    pass


class MissingNodeError(DepGrapherError, LookupError):
    """A strict graph operation referenced an unregistered node."""

    def __init__(self, name: str, operation: str = "") -> None:
        self.name = name
        self.operation = operation
        where = f"{operation}: " if operation else ""
        super().__init__(f"{where}node with name {name!r} not present in graph")


class IngestionError(DepGrapherError):
    """Reading the input failed part-way through.

    Attributes:
        graph: Graph holding every edge dispatched before the failure.
        lines_read: Number of logical lines consumed before the failure.
    """

    def __init__(
        self,
        message: str,
        graph: Optional["DependencyGraph"] = None,
        lines_read: int = 0,
    ) -> None:
        super().__init__(message)
        self.graph = graph
        self.lines_read = lines_read
