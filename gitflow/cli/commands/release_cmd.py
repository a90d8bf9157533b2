from __future__ import annotations

import os
from pathlib import Path

import typer

from gitflow.cli.commands.common import exit_flow
from gitflow.cli.context import CLIContext, build_context
from gitflow.core.errors import ErrorCode
from gitflow.core.result import Err
from gitflow.services.release.dispatch import run_dispatch
from gitflow.services.release.events import Trigger, read_trigger
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.service import log_config, run_trigger


def _remote_context() -> tuple[CLIContext, RepositoryGateway]:
    ctx = build_context()
    if ctx.gateway is None:
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
    log_config(ctx.config, ctx.console)
    return ctx, ctx.gateway


def _run(trigger: Trigger) -> None:
    ctx, gateway = _remote_context()
    result = run_trigger(trigger=trigger, gateway=gateway, config=ctx.config, console=ctx.console)
    if isinstance(result, Err):
        exit_flow(result.error, console=ctx.console)
    ctx.console.success("finished!")


def run() -> None:
    """Run the workflow matching the current GitHub Actions event."""
    event_path = os.environ.get("GITHUB_EVENT_PATH")
    ctx, gateway = _remote_context()
    trigger = read_trigger(
        event_name=os.environ.get("GITHUB_EVENT_NAME"),
        event_path=Path(event_path) if event_path else None,
    )
    if isinstance(trigger, Err):
        exit_flow(trigger.error, console=ctx.console)

    result = run_trigger(
        trigger=trigger.value, gateway=gateway, config=ctx.config, console=ctx.console
    )
    if isinstance(result, Err):
        exit_flow(result.error, console=ctx.console)
    ctx.console.success("finished!")


def dispatch() -> None:
    """Cut a new release branch and open its pull request."""
    ctx, gateway = _remote_context()
    result = run_dispatch(gateway=gateway, config=ctx.config, console=ctx.console)
    if isinstance(result, Err):
        exit_flow(result.error, console=ctx.console)

    outcome = result.value
    ctx.console.print(f"release branch: {outcome.branch}")
    if outcome.pull.url:
        ctx.console.print(f"pull request: {outcome.pull.url}")


def merged(
    pr: int = typer.Argument(..., min=1, help="Number of the merged pull request."),
) -> None:
    """Reintegrate and publish after a pull request was merged."""
    _run(Trigger(kind="merged", pr_number=pr))


def sync(
    pr: int = typer.Argument(..., min=1, help="Number of the release pull request."),
) -> None:
    """Refresh the generated notes of a release pull request."""
    _run(Trigger(kind="synchronize", pr_number=pr))
