"""Console output abstraction.

Workflows report progress through ``ConsoleProtocol`` so they can be
exercised in tests with ``MockConsole`` and run for real with
``RichConsole``. Inside a GitHub Actions job ``RichConsole`` also emits
workflow commands for warnings and errors so they show up as annotations
on the run summary.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "in_github_actions",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def _escape_command_data(message: str) -> str:
    # Workflow command values must not contain raw newlines or '%'.
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


# Prefix printed before a message at each level; DEFAULT/DIM/HEADER have none.
_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}

_RICH_STYLES: dict[Style, str] = {
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}

# Levels that become workflow commands (run annotations) on Actions runners.
_ANNOTATIONS: dict[Style, str] = {Style.ERROR: "error", Style.WARNING: "warning"}


class RichConsole:
    """Console implementation using Rich.

    Args:
        annotate: Emit ``::warning::``/``::error::`` workflow commands
            instead of the styled line. Defaults to auto-detection of the
            Actions runner.
    """

    def __init__(self, *, annotate: bool | None = None) -> None:
        from rich.console import Console

        self._console = Console(highlight=False)
        self._annotate = in_github_actions() if annotate is None else annotate

    def _emit(self, message: str, style: Style) -> None:
        from rich.text import Text

        command = _ANNOTATIONS.get(style)
        if command is not None and self._annotate:
            # Written raw: rich would wrap or restyle the '::' line.
            self._console.out(f"::{command}::{_escape_command_data(message)}", highlight=False)
            return

        rich_style = _RICH_STYLES.get(style, "")
        prefix = _PREFIXES.get(style)
        line = Text()
        if prefix is not None:
            line.append(prefix, style=rich_style)
            line.append(f" {message}")
        else:
            line.append(message, style=rich_style)
        self._console.print(line)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        from rich.text import Text

        self._console.print(Text(message, style=_RICH_STYLES.get(style, "")))

    def success(self, message: str) -> None:
        self._emit(message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self._emit(message, Style.ERROR)

    def warning(self, message: str) -> None:
        self._emit(message, Style.WARNING)

    def info(self, message: str) -> None:
        self._emit(message, Style.INFO)

    def header(self, message: str) -> None:
        self._console.print()
        self._emit(message, Style.HEADER)


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Records every line instead of printing it; used by the test suite."""

    outputs: list[OutputRecord] = field(default_factory=lambda: [])

    def _record(self, message: str, style: Style) -> None:
        prefix = _PREFIXES.get(style)
        text = f"{prefix} {message}" if prefix is not None else message
        self.outputs.append(OutputRecord(text, style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._record(message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self._record(message, Style.ERROR)

    def warning(self, message: str) -> None:
        self._record(message, Style.WARNING)

    def info(self, message: str) -> None:
        self._record(message, Style.INFO)

    def header(self, message: str) -> None:
        self._record(message, Style.HEADER)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style is Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Records whose message contains ``substring``."""
        return [o for o in self.outputs if substring in o.message]
