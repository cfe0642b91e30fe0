"""Tests for depgrapher CLI entrypoints."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest

import depgrapher.main as main
from depgrapher.cli import render as render_module


@pytest.fixture(autouse=True)
def _quiet_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    """Skip logging setup and terminal detection."""
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    monkeypatch.setattr(render_module, "detect_terminal_width", lambda: 0)


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["depgrapher", *argv])
    return main.main()


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_main_parses_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify that `main` parses args and dispatches render_command."""
    captured: dict[str, object] = {}

    def fake_render_command(args) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "render_command", fake_render_command)

    exit_code = _run(
        monkeypatch, "-s", "Dot", "-n", "app", "-o", "stdout", "-w", "2", "a.mk", "b.mk"
    )

    assert exit_code == 0
    parsed = captured["args"]
    assert parsed.syntax == "Dot"
    assert parsed.node == "app"
    assert parsed.outfile == "stdout"
    assert parsed.workers == 2
    assert parsed.format == "dot"
    assert parsed.files == ["a.mk", "b.mk"]


def test_full_tree_to_stdout(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    makefile = _write(tmp_path / "Makefile", "1:2 3\n")

    exit_code = _run(monkeypatch, str(makefile))

    assert exit_code == 0
    assert capsys.readouterr().out == " 1\n| \\\nV  V\n2  3\n"


def test_node_tree_to_stdout(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    makefile = _write(tmp_path / "Makefile", "a: b\nx: a\n")

    exit_code = _run(monkeypatch, "-w", "1", "-n", "a", str(makefile))

    assert exit_code == 0
    assert capsys.readouterr().out == " a\n |\n V\n b\n"


def test_dot_to_stdout_for_node(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    makefile = _write(tmp_path / "Makefile", "1:2 3\n2:4\n9:1\n")

    exit_code = _run(monkeypatch, "-w", "1", "-n", "1", "-o", "stdout", str(makefile))

    assert exit_code == 0
    assert capsys.readouterr().out == (
        'digraph{\n"1"->"2";\n"1"->"3";\n"2"->"4";\n}\n'
    )


def test_export_json_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    makefile = _write(tmp_path / "Makefile", "app: lib\n")
    output = tmp_path / "out" / "graph.json"

    exit_code = _run(monkeypatch, "-o", str(output), "-f", "json", str(makefile))

    assert exit_code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert {node["id"] for node in data["nodes"]} == {"app", "lib"}


def test_export_dot_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    dotfile = _write(tmp_path / "in.dot", 'digraph{\n"app" -> "lib";\n}\n')
    output = tmp_path / "graph.dot"

    exit_code = _run(monkeypatch, "-s", "d", "-o", str(output), str(dotfile))

    assert exit_code == 0
    assert output.read_text(encoding="utf-8") == 'digraph{\n"app"->"lib";\n}\n'


def test_reads_stdin_without_files(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("a: b\n"))

    exit_code = _run(monkeypatch, "-o", "stdout")

    assert exit_code == 0
    assert capsys.readouterr().out == 'digraph{\n"a"->"b";\n}\n'


def test_empty_input_prints_placeholder(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    empty = _write(tmp_path / "empty.mk", "")

    exit_code = _run(monkeypatch, str(empty))

    assert exit_code == 0
    assert capsys.readouterr().out == "{empty graph}\n"


def test_unknown_node_fails(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    makefile = _write(tmp_path / "Makefile", "a: b\n")

    assert _run(monkeypatch, "-n", "zzz", str(makefile)) == 1


def test_invalid_syntax_is_config_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    makefile = _write(tmp_path / "Makefile", "a: b\n")

    assert _run(monkeypatch, "-s", "Makefile,Bogus", str(makefile)) == 2


def test_invalid_config_is_config_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    makefile = _write(tmp_path / "Makefile", "a: b\n")
    config = _write(tmp_path / "depgrapher.json", '{"workers": 0}')

    assert _run(monkeypatch, "-c", str(config), str(makefile)) == 2


def test_unsupported_config_file_is_config_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    makefile = _write(tmp_path / "Makefile", "a: b\n")
    config = _write(tmp_path / "depgrapher.ini", "[depgrapher]\n")

    assert _run(monkeypatch, "-c", str(config), str(makefile)) == 2


def test_zero_workers_is_config_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    makefile = _write(tmp_path / "Makefile", "a: b\n")

    assert _run(monkeypatch, "-w", "0", str(makefile)) == 2


def test_missing_input_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    assert _run(monkeypatch, str(tmp_path / "missing.mk")) == 1


def test_config_file_controls_rendering(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write(
        tmp_path / "depgrapher.toml",
        '[depgrapher]\nsyntax = "Dot"\nworkers = 1\nshared_marker = "*"\n',
    )
    dotfile = _write(
        tmp_path / "in.dot",
        'digraph{\na -> b;\na -> c;\nb -> d;\nc -> d;\n}\nx: y\n',
    )

    exit_code = _run(monkeypatch, "-c", str(config), "-n", "a", str(dotfile))

    assert exit_code == 0
    out = capsys.readouterr().out
    assert out.splitlines()[-1] == " d  *d"
    assert "x" not in out


def test_wraps_to_configured_width(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    makefile = _write(tmp_path / "Makefile", "1:2 3\n")
    config = _write(tmp_path / "depgrapher.toml", "[depgrapher]\nterminal_width = 2\n")

    exit_code = _run(monkeypatch, "-c", str(config), str(makefile))

    assert exit_code == 0
    assert capsys.readouterr().out == " 1\n|\nV\n2\n\n\n\\\n V\n 3\n"


def test_help_lists_default_syntax(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """The --help text renders, including the inline syntax template."""
    monkeypatch.setenv("COLUMNS", "200")
    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "--help")

    assert excinfo.value.code == 0
    help_text = " ".join(capsys.readouterr().out.split())
    assert '"GraphSuffix",true}' in help_text
    assert "(default: Makefile,Dot)" in help_text
