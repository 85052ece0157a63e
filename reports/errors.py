"""
Error taxonomy for the task engine.

Errors are raised where they are detected inside the domain and converted to
ServiceResult values by the services, so callers can tell a refusal (403) from
a bad argument (400) without catching exceptions.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    PERMISSION_DENIED = "permission_denied"
    NO_OP_STATE = "no_op_state"
    CONFIGURATION = "configuration"


class TaskError(Exception):
    """Base class for every failure the engine reports."""
    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class NotFoundError(TaskError):
    kind = ErrorKind.NOT_FOUND


class InvalidArgumentError(TaskError):
    kind = ErrorKind.INVALID_ARGUMENT


class PermissionDeniedError(TaskError):
    """
    The current state's validator refused the (role, operation) pair.
    This is NOT a bug - it's the policy working correctly.
    """
    kind = ErrorKind.PERMISSION_DENIED


class NoOpStateError(TaskError):
    kind = ErrorKind.NO_OP_STATE


class ConfigurationError(TaskError):
    """A state or command has no registered handler. Programmer error."""
    kind = ErrorKind.CONFIGURATION


def require_text(value: Optional[str], name: str) -> str:
    """Reject None and whitespace-only strings."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{name} must not be blank")
    return value


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a service call: either a value or a TaskError."""
    value: Optional[T] = None
    error: Optional[TaskError] = None

    @classmethod
    def success(cls, value: T) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskError) -> "ServiceResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
