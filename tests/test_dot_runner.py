"""Tests for the Graphviz bridge, with `dot` and subprocess stubbed out."""
from __future__ import annotations

import subprocess

import pytest

from yuml_dot import dot_runner
from yuml_dot.dot_runner import find_dot, run_dot
from yuml_dot.errors import RenderError


@pytest.fixture
def fake_dot(monkeypatch):
    """Pretend Graphviz lives at /usr/bin/dot and record every call."""
    calls = []
    result = {"returncode": 0, "stdout": b"<svg/>", "stderr": b""}

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        return subprocess.CompletedProcess(
            command, result["returncode"], stdout=result["stdout"], stderr=result["stderr"]
        )

    monkeypatch.setattr(dot_runner.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(dot_runner.subprocess, "run", fake_run)
    return calls, result


class TestFindDot:
    def test_missing_binary(self, monkeypatch):
        monkeypatch.setattr(dot_runner.shutil, "which", lambda name: None)
        with pytest.raises(RenderError, match="not found"):
            find_dot()

    def test_custom_binary_name(self, fake_dot):
        assert find_dot("dot2") == "/usr/bin/dot2"


class TestRunDot:
    def test_pipes_dot_text_to_graphviz(self, fake_dot):
        calls, _ = fake_dot
        assert run_dot("digraph G {}\n") == b"<svg/>"
        command, kwargs = calls[0]
        assert command == ["/usr/bin/dot", "-Tsvg"]
        assert kwargs["input"] == b"digraph G {}\n"
        assert kwargs["timeout"] == 30.0

    def test_output_format(self, fake_dot):
        calls, _ = fake_dot
        run_dot("digraph G {}", "png")
        assert calls[0][0][-1] == "-Tpng"

    def test_unsupported_format(self, fake_dot):
        calls, _ = fake_dot
        with pytest.raises(RenderError, match="Unsupported output format"):
            run_dot("digraph G {}", "gif")
        assert calls == []

    def test_non_zero_exit(self, fake_dot):
        _, result = fake_dot
        result.update(returncode=1, stdout=b"", stderr=b"Error: syntax error in line 1")
        with pytest.raises(RenderError, match="status 1: Error: syntax error"):
            run_dot("digraph {")

    def test_long_stderr_is_truncated(self, fake_dot):
        _, result = fake_dot
        result.update(returncode=1, stderr=b"x" * 1000)
        with pytest.raises(RenderError) as exc_info:
            run_dot("digraph {")
        assert str(exc_info.value).endswith("x" * 240 + "...")

    def test_timeout(self, monkeypatch):
        def slow_run(command, **kwargs):
            raise subprocess.TimeoutExpired(command, kwargs["timeout"])

        monkeypatch.setattr(dot_runner.shutil, "which", lambda name: "/usr/bin/dot")
        monkeypatch.setattr(dot_runner.subprocess, "run", slow_run)
        with pytest.raises(RenderError, match="timed out after 2s"):
            run_dot("digraph G {}", timeout=2)

    def test_os_error(self, monkeypatch):
        def broken_run(command, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(dot_runner.shutil, "which", lambda name: "/usr/bin/dot")
        monkeypatch.setattr(dot_runner.subprocess, "run", broken_run)
        with pytest.raises(RenderError, match="denied"):
            run_dot("digraph G {}")
