# content_api/core/result.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from bson.errors import InvalidDocument
from pymongo.errors import (
    BulkWriteError,
    DuplicateKeyError,
    InvalidOperation,
    OperationFailure,
    WriteError,
)

# Server error codes that mean "another writer got there first"
WRITE_CONFLICT_CODES = {11000, 11001, 112}
# DocumentValidationFailure: the collection validator rejected the document
VALIDATION_FAILURE_CODE = 121


class ErrorKind(str, Enum):
    INPUT_INVALID = "input_invalid"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class DaoResult:
    """
    Outcome of a DAO operation.

    Falsy on failure, so ``if not await dao.insert(doc)`` still works as a
    sentinel check. ``error`` tells callers which class of fault occurred.
    """
    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> "DaoResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str = "") -> "DaoResult":
        return cls(ok=False, error=error, message=message)


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a driver/argument exception onto an ErrorKind."""
    if isinstance(exc, (InvalidDocument, InvalidOperation, TypeError, ValueError)):
        return ErrorKind.INPUT_INVALID
    if isinstance(exc, WriteError) and exc.code == VALIDATION_FAILURE_CODE:
        return ErrorKind.INPUT_INVALID
    if isinstance(exc, BulkWriteError):
        # An ordered batch stops at its first write error
        write_errors = (exc.details or {}).get("writeErrors") or []
        if write_errors and write_errors[0].get("code") == VALIDATION_FAILURE_CODE:
            return ErrorKind.INPUT_INVALID
        return ErrorKind.CONFLICT
    if isinstance(exc, (DuplicateKeyError, WriteError)):
        return ErrorKind.CONFLICT
    if isinstance(exc, OperationFailure):
        if exc.code in WRITE_CONFLICT_CODES:
            return ErrorKind.CONFLICT
        return ErrorKind.UNAVAILABLE
    # ConnectionFailure, timeouts and anything else from the driver
    return ErrorKind.UNAVAILABLE
