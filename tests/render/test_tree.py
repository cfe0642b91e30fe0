"""Tests for ASCII tree rendering."""

import threading

import pytest

from depgrapher.errors import MissingNodeError
from depgrapher.graph import DependencyGraph, SimpleNode
from depgrapher.render.tree import EMPTY_GRAPH, TreeRenderer, render_full_tree, render_tree


def _graph(*edges) -> DependencyGraph:
    graph = DependencyGraph()
    for source, target in edges:
        graph.add_edge_and_nodes(source, target)
    return graph


def test_chain() -> None:
    graph = _graph(("a", "b"))

    assert render_tree(graph, "a") == [" a", " |", " V", " b"]


def test_leaf_root() -> None:
    graph = _graph(("a", "b"))

    assert render_tree(graph, SimpleNode("b")) == [" b"]


def test_diamond_marks_shared_dependency() -> None:
    """The second visit of d is drawn with the shared marker and not expanded."""
    graph = _graph(("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"))

    lines = render_tree(graph, "a")

    assert lines == [
        "   a",
        "  / |",
        " V  V",
        " b  c",
        " |   |",
        " V   V",
        " d  &d",
    ]
    assert sum(line.count("&d") for line in lines) == 1


def test_custom_shared_marker() -> None:
    graph = _graph(("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"))

    assert render_tree(graph, "a", shared_marker="*")[-1] == " d  *d"


def test_self_loop_terminates() -> None:
    graph = _graph(("a", "a"))

    assert render_tree(graph, "a") == [" a", "  |", "  V", " &a"]


def test_right_leaning_connector() -> None:
    graph = _graph(("1", "2"), ("1", "3"))

    assert render_tree(graph, "1") == ["  1", " | \\", " V  V", " 2  3"]


def test_wide_name_centres_children() -> None:
    graph = _graph(("long_name", "b"))

    assert render_tree(graph, "long_name") == [" long_name", "     |", "     V", "     b"]


def test_repeated_renders_are_independent() -> None:
    graph = _graph(("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"))

    assert render_tree(graph, "a") == render_tree(graph, "a")
    # d was fully drawn under a; a fresh render from d is not marked
    assert render_tree(graph, "d") == [" d"]


def test_none_root_rejected() -> None:
    with pytest.raises(ValueError):
        render_tree(_graph(("a", "b")), None)


def test_unknown_root_rejected() -> None:
    with pytest.raises(MissingNodeError):
        render_tree(_graph(("a", "b")), "zzz")


def test_full_render_drops_synthetic_root() -> None:
    graph = _graph(("1", "2"), ("1", "3"))

    assert render_full_tree(graph) == [" 1", "| \\", "V  V", "2  3"]


def test_full_render_several_roots() -> None:
    graph = _graph(("a", "b"), ("c", "b"))

    assert render_full_tree(graph) == ["a  c", "|   |", "V   V", "b  &b"]


def test_full_render_isolated_node() -> None:
    graph = DependencyGraph()
    graph.add_nodes("x")

    assert render_full_tree(graph) == ["x"]


def test_full_render_pure_cycle() -> None:
    """Nodes without a dependant-free ancestor still appear."""
    graph = _graph(("a", "b"), ("b", "a"))

    assert render_full_tree(graph) == ["a", "|", "V", "b", " |", " V", "&a"]


def test_full_render_empty_graph() -> None:
    assert render_full_tree(DependencyGraph()) == [EMPTY_GRAPH]


def test_full_render_leaves_graph_untouched() -> None:
    graph = _graph(("a", "b"))

    render_full_tree(graph)

    assert graph.node_count() == 2
    assert graph.get_node("_all") is None


def test_synthetic_root_name_collision() -> None:
    graph = _graph(("_all", "b"))

    assert render_full_tree(graph, synthetic_root="_all") == ["_all", " |", " V", " b"]


def test_renderer_holds_graph_lock() -> None:
    """A writer thread cannot mutate the graph while a render is running."""
    graph = _graph(("a", "b"))
    renderer = TreeRenderer()
    entered = threading.Event()
    added = threading.Event()

    def writer() -> None:
        entered.wait()
        graph.add_edge_and_nodes("a", "c")
        added.set()

    thread = threading.Thread(target=writer)
    thread.start()
    with graph.locked():
        entered.set()
        assert not added.wait(0.1)
        lines = renderer.render(graph, "a")
    thread.join()

    assert lines == [" a", " |", " V", " b"]
    assert added.is_set()


def _chain(length: int) -> DependencyGraph:
    graph = DependencyGraph(synced=False)
    for i in range(length - 1):
        graph.add_edge_and_nodes(f"n{i}", f"n{i + 1}")
    return graph


def test_deep_chain_beyond_recursion_limit() -> None:
    """Chains deeper than the interpreter's recursion limit still render."""
    graph = _chain(2000)

    lines = render_tree(graph, "n0")

    assert len(lines) == 3 * 1999 + 1
    assert lines[0].strip() == "n0"
    assert lines[-1].strip() == "n1999"
    assert not any("&" in line for line in lines)


def test_deep_chain_full_render() -> None:
    lines = render_full_tree(_chain(2000))

    assert len(lines) == 3 * 1999 + 1
    assert lines[0].strip() == "n0"
    assert lines[-1].strip() == "n1999"
