"""Result type for explicit error handling.

Workflows never raise for expected failures (a missing label, a merge
conflict, an unparsable version). Instead every fallible step returns
either ``Ok(value)`` or ``Err(error)`` and the caller decides whether the
failure is fatal:

    result = gateway.get_branch("develop")
    if isinstance(result, Err):
        return result
    branch = result.value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying ``value``."""

    value: T

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying ``error``."""

    error: E

    def unwrap(self) -> None:
        """Raises ValueError with the error.

        Only meant for tests and scripts where a failure is a bug.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
