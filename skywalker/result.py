"""
Result: the single outcome delivered by every transport operation.

A coroutine returning a Result delivers exactly one outcome: a value, an
ErrorType, or one of the two "nothing to report" states.
"""
from __future__ import annotations

import dataclasses
import enum
from typing import Generic, TypeVar

from .errors import ErrorType

T = TypeVar("T")


class Outcome(enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    # Server answered but has no position for the tag yet; poll again later
    NO_UPDATE = "no_update"
    # Server position refers to a receiver missing from the loaded topology
    NOT_FOUND = "not_found"


@dataclasses.dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a transport operation, carrying either a value or an ErrorType."""

    outcome: Outcome
    value: T | None = None
    error: ErrorType | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(Outcome.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: ErrorType) -> Result[T]:
        return cls(Outcome.ERROR, error=error)

    @classmethod
    def no_update(cls) -> Result[T]:
        return cls(Outcome.NO_UPDATE)

    @classmethod
    def not_found(cls) -> Result[T]:
        return cls(Outcome.NOT_FOUND)

    @property
    def is_success(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.outcome is Outcome.ERROR

    @property
    def is_no_update(self) -> bool:
        return self.outcome is Outcome.NO_UPDATE

    @property
    def is_not_found(self) -> bool:
        return self.outcome is Outcome.NOT_FOUND

    def __str__(self) -> str:
        if self.is_success:
            return f"success: {self.value}"
        if self.is_error:
            return f"error: {self.error.value}"
        return self.outcome.value
