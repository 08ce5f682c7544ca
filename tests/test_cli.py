"""Tests for the yuml-dot command line front end."""
from __future__ import annotations

import pytest

from yuml_dot import cli


@pytest.fixture
def source(tmp_path):
    def write(text: str):
        path = tmp_path / "diagram.yuml"
        path.write_text(text, encoding="utf-8")
        return path

    return write


class TestCli:
    def test_writes_dot_to_a_file(self, source, tmp_path):
        out = tmp_path / "diagram.dot"
        code = cli.main([str(source("// {type:class}\n[A]->[B]")), "-o", str(out)])
        assert code == 0
        dot = out.read_text(encoding="utf-8")
        assert dot.startswith("digraph G {")
        assert "A1 -> A2" in dot

    def test_writes_dot_to_stdout(self, source, capsys):
        code = cli.main([str(source("// {type:class}\n[A]"))])
        assert code == 0
        assert "digraph G {" in capsys.readouterr().out

    def test_type_flag_overrides_missing_directive(self, source, tmp_path):
        out = tmp_path / "diagram.dot"
        code = cli.main([str(source("(start)->(end)")), "-t", "activity", "-o", str(out)])
        assert code == 0
        assert 'shape="doublecircle"' in out.read_text(encoding="utf-8")

    def test_direction_and_dark_flags(self, source, tmp_path):
        out = tmp_path / "diagram.dot"
        cli.main([str(source("// {type:class}\n[A]")), "-d", "LR", "--dark", "-o", str(out)])
        dot = out.read_text(encoding="utf-8")
        assert "rankdir = LR" in dot
        assert "color=white" in dot

    def test_missing_type_exits_with_error(self, source):
        assert cli.main([str(source("[A]"))]) == 2

    def test_missing_file_exits_with_error(self, tmp_path):
        assert cli.main([str(tmp_path / "nope.yuml")]) == 2

    def test_undecodable_file_exits_with_error(self, tmp_path):
        path = tmp_path / "latin1.yuml"
        path.write_bytes("// {type:class}\n[Caf\u00e9]".encode("latin-1"))
        assert cli.main([str(path)]) == 2

    def test_diagnostics_do_not_fail_by_default(self, source, tmp_path):
        out = tmp_path / "diagram.dot"
        assert cli.main([str(source("// {type:class}\n[A]foo[B]")), "-o", str(out)]) == 0

    def test_strict_fails_on_diagnostics(self, source, tmp_path):
        out = tmp_path / "diagram.dot"
        code = cli.main([str(source("// {type:class}\n[A]foo[B]")), "--strict", "-o", str(out)])
        assert code == 1
        assert out.exists()

    def test_image_formats_go_through_graphviz(self, source, tmp_path, monkeypatch):
        rendered = []

        def fake_run_dot(dot_text, fmt):
            rendered.append(fmt)
            return b"<svg/>"

        monkeypatch.setattr(cli, "run_dot", fake_run_dot)
        out = tmp_path / "diagram.svg"
        code = cli.main([str(source("// {type:class}\n[A]")), "-f", "svg", "-o", str(out)])
        assert code == 0
        assert rendered == ["svg"]
        assert out.read_bytes() == b"<svg/>"

    def test_rejects_unknown_format(self, source):
        with pytest.raises(SystemExit):
            cli.main([str(source("[A]")), "-f", "gif"])
