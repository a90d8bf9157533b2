"""Map a GitHub Actions trigger to the workflow that should run."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from gitflow.core.result import Err, Ok, Result
from gitflow.core.structured import as_str_dict, get_bool, get_int, get_str, get_table
from gitflow.services.release.errors import FlowError

TriggerKind = Literal["dispatch", "merged", "synchronize", "skip"]


@dataclass(frozen=True, slots=True)
class Trigger:
    kind: TriggerKind
    pr_number: int | None = None
    reason: str | None = None  # why a trigger is skipped


def _read_payload(event_path: Path | None) -> Result[dict[str, object], FlowError]:
    if event_path is None:
        return Err(
            FlowError(
                kind="configuration",
                message="event payload path is not defined",
                hint="GITHUB_EVENT_PATH is set by the Actions runner",
            )
        )
    try:
        obj: object = json.loads(event_path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(
            FlowError(kind="configuration", message=f"failed to read event payload: {e}")
        )
    except json.JSONDecodeError as e:
        return Err(
            FlowError(
                kind="configuration",
                message=f"invalid JSON in event payload: {e}",
                hint=str(event_path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(FlowError(kind="configuration", message="event payload must be an object"))
    return Ok(data)


def read_trigger(*, event_name: str | None, event_path: Path | None) -> Result[Trigger, FlowError]:
    """Decide which workflow an Actions event maps to.

    Pull request events carry only the number forward; the pull request
    itself is fetched again so the workflow sees its current state.
    """
    if event_name == "workflow_dispatch":
        return Ok(Trigger(kind="dispatch"))

    if event_name not in ("pull_request", "pull_request_target"):
        return Ok(Trigger(kind="skip", reason=f"unsupported event: {event_name or '(none)'}"))

    payload = _read_payload(event_path)
    if isinstance(payload, Err):
        return payload

    action = get_str(payload.value, "action")
    pull = get_table(payload.value, "pull_request")
    if pull is None:
        return Err(FlowError(kind="configuration", message="pull request is not defined"))

    number = get_int(pull, "number") or get_int(payload.value, "number")
    if number is None:
        return Err(FlowError(kind="configuration", message="pull request number is not defined"))

    if action == "closed":
        if not get_bool(pull, "merged"):
            return Ok(Trigger(kind="skip", pr_number=number, reason="pull request is not merged"))
        return Ok(Trigger(kind="merged", pr_number=number))

    if action == "synchronize":
        return Ok(Trigger(kind="synchronize", pr_number=number))

    return Ok(
        Trigger(kind="skip", pr_number=number, reason=f"unsupported pull_request action: {action}")
    )
