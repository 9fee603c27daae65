"""
repositories/result.py
----------------------
Outcome type returned by every repository operation.

A Result tells the caller which of three things happened: the operation
succeeded (with a value), the target row does not exist, or the store
failed (with the cause attached). Repositories never raise to callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

# Sentinel id for callers that want a plain int: Result.unwrap_or(FAILED_ID).
FAILED_ID = -1


class Status(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class Result(Generic[T]):
    status: Status
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def ok(cls, value: Any = True) -> "Result":
        return cls(Status.OK, value)

    @classmethod
    def not_found(cls) -> "Result":
        return cls(Status.NOT_FOUND)

    @classmethod
    def failed(cls, error: BaseException) -> "Result":
        return cls(Status.FAILED, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is Status.OK

    @property
    def is_not_found(self) -> bool:
        return self.status is Status.NOT_FOUND

    @property
    def is_failed(self) -> bool:
        return self.status is Status.FAILED

    def unwrap_or(self, default: T) -> T:
        """Return the value on success, otherwise ``default``."""
        return self.value if self.is_ok else default

    def __bool__(self) -> bool:
        # Truthiness follows status, not value: Result.ok(0) is truthy.
        return self.is_ok
