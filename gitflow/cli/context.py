from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from gitflow.core.errors import ErrorCode
from gitflow.core.result import Err
from gitflow.output.console import ConsoleProtocol, RichConsole
from gitflow.services.release.config import (
    FlowConfig,
    load_flow_config,
    read_action_inputs,
    read_config_file,
    resolve_credentials,
)
from gitflow.services.release.errors import FlowError
from gitflow.services.release.gateway import RepositoryGateway
from gitflow.services.release.gh import GhGateway

# Set by the app callback from --config / --repo.
CONFIG_PATH_ENV = "GITFLOW_CONFIG"
REPO_ENV = "GITFLOW_REPO"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: FlowConfig
    console: ConsoleProtocol
    gateway: RepositoryGateway | None


def _exit_config(error: FlowError) -> NoReturn:
    typer.echo(f"error: {error.message}", err=True)
    if error.hint:
        typer.echo(f"hint: {error.hint}", err=True)
    raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))


def build_context(*, remote: bool = True) -> CLIContext:
    """Assemble config, console and gateway for one command run.

    Credentials are checked here, before any command touches GitHub.
    """
    console = RichConsole()

    inputs: dict[str, object] = {}
    config_path = os.environ.get(CONFIG_PATH_ENV)
    if config_path:
        file_inputs = read_config_file(Path(config_path))
        if isinstance(file_inputs, Err):
            _exit_config(file_inputs.error)
        inputs.update(file_inputs.value)
    inputs.update(read_action_inputs(os.environ))

    config = load_flow_config(inputs=inputs, console=console)

    gateway: RepositoryGateway | None = None
    if remote:
        credentials = resolve_credentials(environ=os.environ, repo=os.environ.get(REPO_ENV))
        if isinstance(credentials, Err):
            _exit_config(credentials.error)
        gateway = GhGateway(credentials=credentials.value)

    return CLIContext(config=config, console=console, gateway=gateway)
