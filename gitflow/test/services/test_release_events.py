from __future__ import annotations

import json
from pathlib import Path

from gitflow.core.result import Err, Ok
from gitflow.services.release.events import Trigger, read_trigger


def _event(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_workflow_dispatch() -> None:
    assert read_trigger(event_name="workflow_dispatch", event_path=None) == Ok(
        Trigger(kind="dispatch")
    )


def test_merged_pull_request(tmp_path: Path) -> None:
    path = _event(tmp_path, {"action": "closed", "pull_request": {"number": 7, "merged": True}})
    assert read_trigger(event_name="pull_request", event_path=path) == Ok(
        Trigger(kind="merged", pr_number=7)
    )


def test_closed_without_merge_is_skipped(tmp_path: Path) -> None:
    path = _event(tmp_path, {"action": "closed", "pull_request": {"number": 7, "merged": False}})
    result = read_trigger(event_name="pull_request", event_path=path)
    assert isinstance(result, Ok)
    assert result.value.kind == "skip"
    assert result.value.reason == "pull request is not merged"


def test_synchronize(tmp_path: Path) -> None:
    path = _event(tmp_path, {"action": "synchronize", "pull_request": {"number": 12}})
    assert read_trigger(event_name="pull_request", event_path=path) == Ok(
        Trigger(kind="synchronize", pr_number=12)
    )


def test_other_events_are_skipped(tmp_path: Path) -> None:
    opened = _event(tmp_path, {"action": "opened", "pull_request": {"number": 1}})
    result = read_trigger(event_name="pull_request", event_path=opened)
    assert isinstance(result, Ok)
    assert result.value.kind == "skip"

    push = read_trigger(event_name="push", event_path=None)
    assert isinstance(push, Ok)
    assert push.value.kind == "skip"


def test_pull_request_event_requires_payload(tmp_path: Path) -> None:
    missing = read_trigger(event_name="pull_request", event_path=None)
    assert isinstance(missing, Err)
    assert missing.error.kind == "configuration"

    broken = tmp_path / "event.json"
    broken.write_text("{", encoding="utf-8")
    invalid = read_trigger(event_name="pull_request", event_path=broken)
    assert isinstance(invalid, Err)

    no_pull = read_trigger(
        event_name="pull_request", event_path=_event(tmp_path, {"action": "closed"})
    )
    assert isinstance(no_pull, Err)
    assert no_pull.error.message == "pull request is not defined"
