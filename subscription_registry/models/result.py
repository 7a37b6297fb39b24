"""Explicit result values returned by registry operations.

Registry operations never raise for NotFound or Unauthorized; they return
``Err`` carrying a :class:`RegistryError`. ``unwrap()`` is a caller-side
convenience that turns an ``Err`` into :class:`RegistryOperationError`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Generic, NoReturn, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Registry error taxonomy."""

    NOT_FOUND = "NotFound"  # No live record for the referenced id
    UNAUTHORIZED = "Unauthorized"  # Caller failed the operation's identity check


class RegistryError(BaseModel):
    """Error value returned in place of a result."""

    kind: ErrorKind = Field(..., description="Error category")
    message: str = Field(..., description="Human readable message")

    @classmethod
    def not_found(cls, message: str) -> "RegistryError":
        return cls(kind=ErrorKind.NOT_FOUND, message=message)

    @classmethod
    def unauthorized(cls, message: str) -> "RegistryError":
        return cls(kind=ErrorKind.UNAUTHORIZED, message=message)


class RegistryOperationError(Exception):
    """Raised by ``Err.unwrap()``."""

    def __init__(self, error: RegistryError):
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T
    is_ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed result."""

    error: RegistryError
    is_ok: ClassVar[bool] = False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> NoReturn:
        raise RegistryOperationError(self.error)


Result = Union[Ok[T], Err]
