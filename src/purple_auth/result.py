"""Discriminated result type returned by every client operation.

Usage:
    ```python
    match client.verify(token):
        case Ok(claims):
            user = claims["sub"]
        case Err(ErrorKind.EXPIRED_TOKEN):
            ...  # ask the caller to refresh
        case Err(reason):
            ...
    ```
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying its payload (``None`` for unit results)."""

    value: T

    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying exactly one error kind."""

    error: E

    def is_ok(self) -> bool:
        return False


type Result[T, E] = Ok[T] | Err[E]
