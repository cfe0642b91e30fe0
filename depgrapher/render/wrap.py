"""Terminal-width wrapping for rendered trees.

Wide trees are cut into column chunks of the terminal width; the chunks
are stacked vertically, separated by a blank row. This is a plain wrap,
the tree is not re-laid out.
"""

from typing import List, Optional, Sequence

from rich.console import Console


def wrap_lines(lines: Sequence[str], width: int) -> List[str]:
    """Wrap rendered rows to ``width`` columns.

    A width of zero or less disables wrapping.
    """
    if width <= 0:
        return list(lines)
    total = max((len(line) for line in lines), default=0)
    if total <= width:
        return list(lines)

    wrapped: List[str] = []
    for start in range(0, total, width):
        if start:
            wrapped.append("")
        wrapped.extend(line[start:start + width].rstrip() for line in lines)
    return wrapped


def detect_terminal_width(console: Optional[Console] = None) -> int:
    """Column width of the output terminal, or 0 when not writing to one."""
    console = console or Console()
    if not console.is_terminal:
        return 0
    return console.width
