from __future__ import annotations

import os
from pathlib import Path

import typer

from gitflow import __version__
from gitflow.cli.commands.release_cmd import dispatch, merged, run, sync
from gitflow.cli.commands.version_cmd import classify, next_version
from gitflow.cli.context import CONFIG_PATH_ENV, REPO_ENV
from gitflow.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Workflows
app.command()(run)
app.command()(dispatch)
app.command()(merged)
app.command()(sync)

# Offline helpers
app.command()(classify)
app.command("next-version")(next_version)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="TOML file with workflow options (action inputs take precedence).",
    ),
    repo: str | None = typer.Option(
        None,
        "--repo",
        help="Repository as owner/name (defaults to GITHUB_REPOSITORY).",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' is not a file", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
        os.environ[CONFIG_PATH_ENV] = str(path)

    if repo is not None:
        os.environ[REPO_ENV] = repo


def main() -> None:
    app()
