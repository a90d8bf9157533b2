from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

FlowErrorKind = Literal[
    "configuration",
    "classification",
    "version",
    "missing_metadata",
    "gateway",
]


@dataclass(frozen=True, slots=True)
class FlowError:
    kind: FlowErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
