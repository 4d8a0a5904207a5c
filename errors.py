"""
Engine Errors and Results
Error kinds raised by stores and the tagged results returned by services
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, Union


T = TypeVar("T")


class ErrorKind(str, Enum):
    """Recoverable failure kinds surfaced to callers"""
    PLAN_LIMIT_EXCEEDED = "plan_limit_exceeded"
    NOT_FOUND = "not_found"
    INVALID_SCHEDULE = "invalid_schedule"
    INVALID_INPUT = "invalid_input"
    PERMISSION_DENIED = "permission_denied"
    STORAGE_UNAVAILABLE = "storage_unavailable"


class MedicineEngineError(Exception):
    """
    Base class for engine errors.

    Only the subclasses are raised; each sets the ErrorKind it maps to.
    """

    kind: ErrorKind

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail


class PlanLimitExceeded(MedicineEngineError):
    kind = ErrorKind.PLAN_LIMIT_EXCEEDED


class NotFound(MedicineEngineError):
    kind = ErrorKind.NOT_FOUND


class InvalidSchedule(MedicineEngineError):
    """
    Raised while building an empty WeekDays or CustomDates schedule.

    Deliberately not a ValueError subclass so pydantic lets it propagate
    unwrapped out of model validation.
    """
    kind = ErrorKind.INVALID_SCHEDULE


class PermissionDenied(MedicineEngineError):
    kind = ErrorKind.PERMISSION_DENIED


class InvalidInput(MedicineEngineError):
    kind = ErrorKind.INVALID_INPUT


class StorageUnavailable(MedicineEngineError):
    kind = ErrorKind.STORAGE_UNAVAILABLE


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome"""
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome with its kind and a human readable detail"""
    kind: ErrorKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ERROR_TYPES[self.kind](self.detail)


Result = Union[Ok[T], Err]


ERROR_TYPES = {
    ErrorKind.PLAN_LIMIT_EXCEEDED: PlanLimitExceeded,
    ErrorKind.NOT_FOUND: NotFound,
    ErrorKind.INVALID_SCHEDULE: InvalidSchedule,
    ErrorKind.INVALID_INPUT: InvalidInput,
    ErrorKind.PERMISSION_DENIED: PermissionDenied,
    ErrorKind.STORAGE_UNAVAILABLE: StorageUnavailable,
}


def from_error(error: MedicineEngineError) -> Err:
    """Convert a raised engine error into an Err result"""
    return Err(kind=error.kind, detail=error.detail)


def capture(operation: Callable[[], T], context: Optional[str] = None) -> Result:
    """Run an operation and fold engine errors into an Err"""
    try:
        return Ok(operation())
    except MedicineEngineError as e:
        detail = f"{context}: {e.detail}" if context else e.detail
        return Err(kind=e.kind, detail=detail)
