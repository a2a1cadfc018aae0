"""Result type for explicit error handling.

Operations that can fail for expected reasons (network, missing files,
bad configuration) return ``Ok(value)`` or ``Err(error)`` instead of
raising. The CLI layer is the only place that turns an ``Err`` into a
process exit.

Usage:
    match locator.bin_version():
        case Ok(version):
            console.print(version)
        case Err(error):
            console.warning(str(error))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result holding ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result holding ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
