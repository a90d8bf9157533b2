from __future__ import annotations

from dataclasses import replace

from gitflow.core.result import Err, Ok
from gitflow.output.console import MockConsole
from gitflow.services.release.config import FlowConfig
from gitflow.services.release.dispatch import run_dispatch
from gitflow.services.release.model import Label
from gitflow.services.release.notes import NotesMeta, extract_meta
from gitflow.test.services.fakes import FakeGateway


def test_first_release_creates_branch_pull_and_label(gateway: FakeGateway) -> None:
    console = MockConsole()

    result = run_dispatch(gateway=gateway, config=FlowConfig(), console=console)
    assert isinstance(result, Ok)
    outcome = result.value
    assert outcome.version == "0.1.1"
    assert outcome.branch == "release/0.1.1"
    assert outcome.created_branch and outcome.created_pull

    assert gateway.branches["release/0.1.1"] == gateway.branches["develop"]
    assert gateway.called("create_label") == [("release", "0366d6")]
    assert gateway.called("generate_release_notes") == [("v0.1.1", None, "release/0.1.1")]

    [pull] = gateway.pulls
    assert pull.title == "Release v0.1.1"
    assert pull.base_branch == "main"
    assert pull.head_branch == "release/0.1.1"
    assert pull.labels == frozenset({"release"})
    assert extract_meta(pull.body) == NotesMeta(previous_version="0.1.0", next_version="0.1.1")
    assert "* feat: something" in pull.body

    assert console.find("release process completed for v0.1.1")


def test_rerun_creates_nothing_new(gateway: FakeGateway) -> None:
    config = FlowConfig()
    assert isinstance(run_dispatch(gateway=gateway, config=config, console=MockConsole()), Ok)
    gateway.calls.clear()

    console = MockConsole()
    result = run_dispatch(gateway=gateway, config=config, console=console)
    assert isinstance(result, Ok)
    assert not result.value.created_branch
    assert not result.value.created_pull
    assert gateway.mutations() == []
    assert len(gateway.pulls) == 1
    assert console.find("already exists. Skipped!")


def test_existing_pull_without_label_gets_labelled(gateway: FakeGateway) -> None:
    config = FlowConfig()
    assert isinstance(run_dispatch(gateway=gateway, config=config, console=MockConsole()), Ok)
    gateway.pulls[0] = replace(gateway.pulls[0], labels=frozenset())
    gateway.calls.clear()

    result = run_dispatch(gateway=gateway, config=config, console=MockConsole())
    assert isinstance(result, Ok)
    assert gateway.mutations() == ["add_labels"]
    assert gateway.called("add_labels") == [(("release",), 1)]


def test_version_follows_latest_release(gateway: FakeGateway) -> None:
    gateway.latest_release = "v1.4.2"
    gateway.labels["release"] = Label(name="release", color="0366d6")
    config = FlowConfig(version_increment="minor")

    result = run_dispatch(gateway=gateway, config=config, console=MockConsole())
    assert isinstance(result, Ok)
    assert result.value.branch == "release/1.5.0"
    assert gateway.called("create_label") == []
    assert gateway.called("generate_release_notes") == [("v1.5.0", "v1.4.2", "release/1.5.0")]
    assert extract_meta(gateway.pulls[0].body) == NotesMeta(
        previous_version="1.4.2", next_version="1.5.0"
    )


def test_label_creation_failure_is_fatal(gateway: FakeGateway) -> None:
    gateway.fail.add("create_label")

    result = run_dispatch(gateway=gateway, config=FlowConfig(), console=MockConsole())
    assert isinstance(result, Err)
    assert result.error.kind == "gateway"
    assert "could not be created" in result.error.message
    assert gateway.mutations() == ["create_label"]


def test_missing_develop_branch(gateway: FakeGateway) -> None:
    del gateway.branches["develop"]

    result = run_dispatch(gateway=gateway, config=FlowConfig(), console=MockConsole())
    assert isinstance(result, Err)
    assert result.error.message == "branch 'develop' not found"
    assert gateway.called("create_ref") == []


def test_non_semver_latest_release_falls_back(gateway: FakeGateway) -> None:
    gateway.latest_release = "nightly"
    console = MockConsole()

    result = run_dispatch(gateway=gateway, config=FlowConfig(), console=console)
    assert isinstance(result, Ok)
    assert result.value.version == "0.1.1"
    assert console.has_warning()
    assert gateway.called("generate_release_notes") == [("v0.1.1", "nightly", "release/0.1.1")]


def test_pull_creation_failure_leaves_branch_for_retry(gateway: FakeGateway) -> None:
    gateway.fail.add("create_pull_request")
    config = FlowConfig()

    assert isinstance(run_dispatch(gateway=gateway, config=config, console=MockConsole()), Err)
    assert "release/0.1.1" in gateway.branches

    gateway.fail.clear()
    gateway.calls.clear()
    result = run_dispatch(gateway=gateway, config=config, console=MockConsole())
    assert isinstance(result, Ok)
    assert not result.value.created_branch
    assert result.value.created_pull
