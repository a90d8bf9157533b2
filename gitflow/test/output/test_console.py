"""Tests for gitflow.output.console module."""

from __future__ import annotations

import pytest

from gitflow.output.console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
    in_github_actions,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DIM) == "dim"


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("failed")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: failed", "warning: careful", "info: fyi"]

    def test_has_error_and_warning(self) -> None:
        console = MockConsole()
        assert not console.has_error()
        console.warning("careful")
        assert console.has_warning()
        assert not console.has_error()
        console.error("failed")
        assert console.has_error()

    def test_find(self) -> None:
        console = MockConsole()
        console.print("on-dispatch: label created")
        console.print("on-dispatch: branch created")
        console.header("other")
        assert len(console.find("created")) == 2

    def test_text(self) -> None:
        console = MockConsole()
        console.print("a")
        console.print("b")
        assert console.text == "a\nb"

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("typed")


class TestRichConsole:
    def test_plain_warning(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(annotate=False).warning("label missing")
        assert "warning: label missing" in capsys.readouterr().out

    def test_annotated_warning(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(annotate=True).warning("label missing")
        assert "::warning::label missing" in capsys.readouterr().out

    def test_annotated_error_escapes_newlines(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(annotate=True).error("failed\n100% broken")
        assert "::error::failed%0A100%25 broken" in capsys.readouterr().out

    def test_print_does_not_interpret_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(annotate=False).print("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in capsys.readouterr().out


def test_in_github_actions(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    assert in_github_actions()
    monkeypatch.setenv("GITHUB_ACTIONS", "false")
    assert not in_github_actions()
    monkeypatch.delenv("GITHUB_ACTIONS")
    assert not in_github_actions()
