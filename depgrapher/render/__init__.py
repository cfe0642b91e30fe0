"""ASCII tree rendering."""

from depgrapher.render.tree import (
    EMPTY_GRAPH,
    Block,
    TreeRenderer,
    render_full_tree,
    render_tree,
)
from depgrapher.render.wrap import detect_terminal_width, wrap_lines

__all__ = [
    "Block",
    "EMPTY_GRAPH",
    "TreeRenderer",
    "detect_terminal_width",
    "render_full_tree",
    "render_tree",
    "wrap_lines",
]
