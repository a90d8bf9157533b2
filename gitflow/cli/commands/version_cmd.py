from __future__ import annotations

from dataclasses import replace
from enum import StrEnum
from typing import cast

import typer

from gitflow.cli.commands.common import exit_flow
from gitflow.cli.context import build_context
from gitflow.core.result import Err
from gitflow.services.release.classify import classify as classify_pull
from gitflow.services.release.model import VersionIncrement
from gitflow.services.release.semver import hotfix_increment, increment


class Increment(StrEnum):
    major = "major"
    minor = "minor"
    patch = "patch"


def classify(
    base: str = typer.Option(..., "--base", help="Base branch of the pull request."),
    head: str = typer.Option(..., "--head", help="Head branch of the pull request."),
    strict: bool | None = typer.Option(
        None, "--strict/--no-strict", help="Override the configured strict mode."
    ),
) -> None:
    """Print the role of a pull request (release, hotfix, feature, undetermined)."""
    ctx = build_context(remote=False)
    config = ctx.config
    if strict is not None and strict != config.strict:
        config = replace(config, strict=strict)
    typer.echo(classify_pull(base, head, config))


def next_version(
    current: str = typer.Argument(..., help="Current version, e.g. v1.2.3."),
    increment_kind: Increment | None = typer.Option(
        None, "--increment", help="Bump kind (defaults to the configured version_increment)."
    ),
    hotfix: bool = typer.Option(False, "--hotfix", help="Compute the next hotfix prerelease."),
) -> None:
    """Print the version that follows CURRENT."""
    ctx = build_context(remote=False)
    if hotfix:
        result = hotfix_increment(current)
    else:
        kind = (
            cast(VersionIncrement, increment_kind.value)
            if increment_kind is not None
            else ctx.config.version_increment
        )
        result = increment(current, kind)
    if isinstance(result, Err):
        exit_flow(result.error, console=ctx.console)
    typer.echo(result.value)
