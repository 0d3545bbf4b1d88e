from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Rejection(str, Enum):
    """Expected, caller-recoverable reasons an operation produced no value."""

    INVALID_INPUT = "invalid_input"
    DUPLICATE_IDENTITY = "duplicate_identity"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    AUTHENTICATION_FAILED = "authentication_failed"


@dataclass
class ServiceResult(Generic[T]):
    """Either a value or a named rejection, never both."""

    value: Optional[T] = None
    rejection: Optional[Rejection] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def found(cls, value: T) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def reject(cls, rejection: Rejection, message: str) -> "ServiceResult[T]":
        return cls(rejection=rejection, message=message)
