"""Tests for graph writers (Dot, other syntaxes, JSON)."""

import io
import json
from pathlib import Path

from depgrapher.export import export_dot, export_json, graph_to_node_link, write_dot, write_graph
from depgrapher.graph import DependencyGraph
from depgrapher.parsers.engine import ingest
from depgrapher.syntax import DOT, MAKEFILE


def _graph(*edges) -> DependencyGraph:
    graph = DependencyGraph()
    for source, target in edges:
        graph.add_edge_and_nodes(source, target)
    return graph


def test_write_dot_format() -> None:
    graph = _graph(("a", "b"), ("a", "c"), ("b", "c"))
    out = io.StringIO()

    edges = write_dot(graph, out)

    assert edges == 3
    assert out.getvalue() == (
        "digraph{\n"
        '"a"->"b";\n'
        '"a"->"c";\n'
        '"b"->"c";\n'
        "}\n"
    )


def test_write_dot_empty_graph() -> None:
    out = io.StringIO()

    assert write_dot(DependencyGraph(), out) == 0
    assert out.getvalue() == "digraph{\n}\n"


def test_isolated_nodes_are_not_written() -> None:
    graph = _graph(("a", "b"))
    graph.add_nodes("lonely")
    out = io.StringIO()

    write_dot(graph, out)

    assert "lonely" not in out.getvalue()


def test_write_graph_with_target_delimiter() -> None:
    graph = _graph(("a", "b"), ("a", "c"))
    out = io.StringIO()

    write_graph(graph, out, MAKEFILE)

    assert out.getvalue() == '\n"a":"b" "c"\n\n'


def test_dot_round_trip() -> None:
    """Writing then re-reading Dot gives the same nodes and edges."""
    graph = _graph(
        ("app", "lib"), ("app", "util"), ("lib", "base"),
        ("util", "base"), ("my app", "lib"),
    )
    out = io.StringIO()
    write_dot(graph, out)

    out.seek(0)
    parsed = ingest(out, [DOT])

    assert {n.name for n in parsed.get_nodes()} == {n.name for n in graph.get_nodes()}
    assert set(parsed.edges()) == set(graph.edges())


def test_makefile_round_trip() -> None:
    graph = _graph(("1", "2"), ("1", "3"), ("2", "4"))
    out = io.StringIO()
    write_graph(graph, out, MAKEFILE)

    out.seek(0)
    parsed = ingest(out, [MAKEFILE])

    assert set(parsed.edges()) == set(graph.edges())


def test_export_dot_creates_parent_dirs(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "graph.dot"

    export_dot(_graph(("a", "b")), target)

    assert target.read_text(encoding="utf-8") == 'digraph{\n"a"->"b";\n}\n'


def test_node_link_json(tmp_path: Path) -> None:
    graph = _graph(("a", "b"))
    graph.add_nodes("lonely")

    data = graph_to_node_link(graph)

    assert data["directed"] is True
    assert {node["id"] for node in data["nodes"]} == {"a", "b", "lonely"}
    assert [(e["source"], e["target"]) for e in data["edges"]] == [("a", "b")]

    target = tmp_path / "graph.json"
    export_json(graph, target)
    assert json.loads(target.read_text(encoding="utf-8")) == data


def test_quoted_names_are_escaped() -> None:
    graph = _graph(('say "hi"', "back\\slash"))
    out = io.StringIO()

    write_dot(graph, out)

    assert out.getvalue() == 'digraph{\n"say \\"hi\\""->"back\\\\slash";\n}\n'


def test_names_with_syntax_tokens_round_trip() -> None:
    """Quotes, infixes and delimiters inside names survive a re-read."""
    edges = {
        ('say "hi"', "a->b"),
        ("my app", "x:y"),
        ("a->b", "back\\slash"),
    }
    for syntax in (DOT, MAKEFILE):
        graph = _graph(*edges)
        out = io.StringIO()
        write_graph(graph, out, syntax)

        out.seek(0)
        parsed = ingest(out, [syntax])

        assert set(parsed.edges()) == edges, syntax
