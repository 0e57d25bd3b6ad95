"""Tagged success/error result returned by every public operation.

Public operations never raise past their boundary for expected failures;
they return ``Ok(value)`` or ``Err(error)`` instead. Callers branch with
``isinstance`` or structural pattern matching::

    match await queue.add(message):
        case Ok():
            ...
        case Err(error=error):
            log.warning("enqueue_failed", error=str(error))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying the operation's value."""

    ok: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a taxonomy error (see ``dealflow.errors``)."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True


Result = Union[Ok[T], Err[E]]
