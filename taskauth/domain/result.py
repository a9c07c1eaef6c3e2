"""Explicit result values for verification steps.

Password, OTP and token checks return Ok or Err instead of raising; the
orchestrating service decides when a failure becomes an exception (unwrap).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from taskauth.domain.enums import ErrorKind
from taskauth.domain.exceptions import exception_for

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful step carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed step carrying an error kind and message."""

    kind: ErrorKind
    message: str

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the AppException subclass for this error's kind."""
        raise exception_for(self.kind, self.message)


Result = Union[Ok[T], Err]
