"""Subprocess execution with Result-based error handling.

The GitHub gateway talks to the forge only through ``gh``. This wrapper
turns each invocation into ``Ok(stdout)`` or ``Err(ProcessError)`` so a
failed call (non-zero exit, timeout, missing binary) never raises.

Usage:
    result = run(["gh", "api", "repos/acme/app"], cwd=Path("."), timeout=60)
    match result:
        case Ok(stdout):
            payload = json.loads(stdout)
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from gitflow.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A ``gh`` (or other) command that did not succeed.

    ``returncode`` is -1 when the process never ran or was killed on
    timeout. ``gh api`` prints the HTTP status on stderr and the JSON
    error document on stdout, so both streams are kept.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _failed(
    cmd: list[str], returncode: int, *, stdout: str = "", stderr: str = ""
) -> Err[ProcessError]:
    return Err(
        ProcessError(command=tuple(cmd), returncode=returncode, stdout=stdout, stderr=stderr)
    )


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    stdin: str | None = None,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute ``cmd`` and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Full environment for the child (inherits ours if None).
        stdin: Text written to the child's standard input, e.g. a JSON
            request body for ``gh api --input -``.
        timeout: Seconds before the child is killed (None waits forever).
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _failed(cmd, -1, stdout=partial, stderr=f"Command timed out after {timeout}s")
    except OSError as e:
        return _failed(cmd, -1, stderr=str(e))

    if proc.returncode != 0:
        return _failed(cmd, proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
    return Ok(proc.stdout)
