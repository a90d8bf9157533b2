from __future__ import annotations

from typing import NoReturn

import typer

from gitflow.core.errors import ErrorCode
from gitflow.output.console import ConsoleProtocol, Style
from gitflow.services.release.errors import FlowError, FlowErrorKind


def flow_error_code(kind: FlowErrorKind) -> ErrorCode:
    if kind == "configuration":
        return ErrorCode.CONFIG_ERROR
    if kind == "gateway":
        return ErrorCode.NETWORK_ERROR
    return ErrorCode.WORKFLOW_ERROR


def exit_flow(error: FlowError, *, console: ConsoleProtocol) -> NoReturn:
    console.error(f"failed! {error.message}")
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(flow_error_code(error.kind)))
