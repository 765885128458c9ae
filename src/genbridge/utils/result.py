"""
Result type returned by every public genbridge operation.

A call either produces ``Ok(value)`` or ``Err(message, error)``; nothing is
raised across the client boundary. ``Err.error`` keeps the typed exception so
callers can re-raise it (``unwrap``) or branch on ``Err.kind``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from genbridge.utils.exceptions import GenbridgeError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err:
    """Failed result with a human-readable message and the originating error."""

    message: str
    error: GenbridgeError | None = None

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> str:
        """Failure family, e.g. 'transport', 'http_status', 'parse', 'validation'."""
        return self.error.kind if self.error is not None else GenbridgeError.kind

    def unwrap(self) -> Any:
        """Raise the stored error (or a GenbridgeError with the message)."""
        if self.error is not None:
            raise self.error
        raise GenbridgeError(self.message)

    def map(self, fn: Callable[[Any], Any]) -> Err:
        return self


Result = Union[Ok[T], Err]


def err_from(exc: GenbridgeError) -> Err:
    """Wrap a genbridge exception in an Err using its message."""
    message = exc.args[0] if exc.args else exc.__class__.__name__
    return Err(str(message), exc)


__all__ = ["Err", "Ok", "Result", "err_from"]
