from __future__ import annotations

import json

from gitflow.core.result import Err, Ok, Result
from gitflow.output.console import ConsoleProtocol, Style
from gitflow.services.release.config import FlowConfig
from gitflow.services.release.dispatch import run_dispatch
from gitflow.services.release.errors import FlowError
from gitflow.services.release.events import Trigger
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.pull_request import (
    run_pull_request_merged,
    run_pull_request_synchronize,
)


def log_config(config: FlowConfig, console: ConsoleProtocol) -> None:
    console.print(f"loaded config {json.dumps(config.as_dict(), indent=2)}", Style.DIM)


def run_trigger(
    *,
    trigger: Trigger,
    gateway: RepositoryGateway,
    config: FlowConfig,
    console: ConsoleProtocol,
) -> Result[None, FlowError]:
    """Run the workflow selected by ``trigger``."""
    match trigger.kind:
        case "skip":
            console.print(f"{trigger.reason or 'nothing to run'}. Skipping...")
            return Ok(None)
        case "dispatch":
            console.header("running on workflow_dispatch event")
            dispatched = run_dispatch(gateway=gateway, config=config, console=console)
            if isinstance(dispatched, Err):
                return dispatched
            return Ok(None)
        case "merged" | "synchronize":
            pass
        case _:
            raise AssertionError(f"unexpected trigger kind: {trigger.kind}")

    if trigger.pr_number is None:
        return Err(FlowError(kind="configuration", message="pull request number is not defined"))

    pull = gateway.get_pull_request(trigger.pr_number)
    if isinstance(pull, Err):
        return pull

    if trigger.kind == "merged":
        console.header(f"running on pull_request closed event (#{trigger.pr_number})")
        merged = run_pull_request_merged(
            pull=pull.value, gateway=gateway, config=config, console=console
        )
        if isinstance(merged, Err):
            return merged
        return Ok(None)

    console.header(f"running on pull_request synchronize event (#{trigger.pr_number})")
    synced = run_pull_request_synchronize(
        pull=pull.value, gateway=gateway, config=config, console=console
    )
    if isinstance(synced, Err):
        return synced
    return Ok(None)
