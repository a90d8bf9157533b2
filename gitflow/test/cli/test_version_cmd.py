from __future__ import annotations

import pytest
import typer

import gitflow.cli.commands.version_cmd as version_cmd
from gitflow.cli.context import CLIContext
from gitflow.core.errors import ErrorCode
from gitflow.output.console import MockConsole
from gitflow.services.release.config import FlowConfig


def _patch_context(monkeypatch: pytest.MonkeyPatch, config: FlowConfig) -> MockConsole:
    console = MockConsole()
    ctx = CLIContext(config=config, console=console, gateway=None)
    monkeypatch.setattr(version_cmd, "build_context", lambda **_: ctx)
    return console


def test_classify_prints_role(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _patch_context(monkeypatch, FlowConfig())

    version_cmd.classify(base="main", head="bugfix", strict=None)
    version_cmd.classify(base="main", head="bugfix", strict=True)

    assert capsys.readouterr().out.splitlines() == ["hotfix", "undetermined"]


def test_next_version_uses_configured_increment(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _patch_context(monkeypatch, FlowConfig(version_increment="minor"))

    version_cmd.next_version(current="v1.2.3", increment_kind=None, hotfix=False)
    major = version_cmd.Increment.major
    version_cmd.next_version(current="v1.2.3", increment_kind=major, hotfix=False)
    version_cmd.next_version(current="v1.2.3", increment_kind=None, hotfix=True)

    assert capsys.readouterr().out.splitlines() == ["1.3.0", "2.0.0", "1.2.4-HOTFIX.0"]


def test_next_version_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    console = _patch_context(monkeypatch, FlowConfig())

    with pytest.raises(typer.Exit) as exc:
        version_cmd.next_version(current="banana", increment_kind=None, hotfix=False)
    assert exc.value.exit_code == int(ErrorCode.WORKFLOW_ERROR)
    assert console.has_error()
