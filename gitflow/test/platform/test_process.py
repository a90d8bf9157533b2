"""Tests for gitflow.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from gitflow.core.result import Err, Ok
from gitflow.platform.process import ProcessError, run


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("gh", "api"), returncode=1, stdout="", stderr="")
        assert str(error) == "gh api failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("gh", "api", "--method", "POST", "repos/acme/app/merges"),
            returncode=1,
            stdout="",
            stderr="HTTP 409",
        )
        assert str(error) == "gh api --method ... failed (exit 1)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_keeps_both_streams(self, tmp_path: Path) -> None:
        script = "import sys; print('{}'); sys.stderr.write('HTTP 404'); sys.exit(1)"
        result = run([sys.executable, "-c", script], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 1
        assert result.error.stdout.strip() == "{}"
        assert "HTTP 404" in result.error.stderr

    def test_stdin_is_forwarded(self, tmp_path: Path) -> None:
        script = "import sys; print(sys.stdin.read().upper())"
        result = run([sys.executable, "-c", script], cwd=tmp_path, stdin='{"base": "develop"}')
        assert isinstance(result, Ok)
        assert '{"BASE": "DEVELOP"}' in result.value

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert len(result.error.stderr) > 0

    def test_timeout(self, tmp_path: Path) -> None:
        script = "import time; time.sleep(5)"
        result = run([sys.executable, "-c", script], cwd=tmp_path, timeout=0.2)
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr
