"""
Result Type

Explicit success/failure values for domain operations, so callers and tests
can inspect failures without relying on exception handling:

    result = validator.validate(payload)
    if result.is_err:
        return [error.to_dict() for error in result.error]
    booking_input = result.value
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar('T')
E = TypeVar('E')


class ResultError(Exception):
    """Raised by unwrap() on an Err whose payload is not itself an exception"""

    def __init__(self, error: Any):
        self.error = error
        super().__init__(f"Called unwrap() on Err: {error!r}")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value"""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying one error, or a tuple of errors for validation"""
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    @property
    def errors(self) -> tuple:
        """The error payload as a tuple, whether one error or many"""
        if isinstance(self.error, tuple):
            return self.error
        return (self.error,)

    def unwrap(self):
        if isinstance(self.error, Exception):
            raise self.error
        raise ResultError(self.error)

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Union[Ok[T], Err[E]]
