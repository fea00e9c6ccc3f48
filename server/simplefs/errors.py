from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    WRONG_KIND = "wrong_kind"
    NOT_EMPTY = "not_empty"
    INVALID_NAME = "invalid_name"


class FSError(Exception):
    """Base class for every rejected tree operation.

    The command protocol only reports success or failure; ``kind`` keeps the
    reason around for logs and the HTTP stderr field.
    """

    kind: ErrorKind

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class NotFound(FSError):
    kind = ErrorKind.NOT_FOUND


class AlreadyExists(FSError):
    kind = ErrorKind.ALREADY_EXISTS


class CapacityExceeded(FSError):
    kind = ErrorKind.CAPACITY_EXCEEDED


class WrongKind(FSError):
    kind = ErrorKind.WRONG_KIND


class NotEmpty(FSError):
    kind = ErrorKind.NOT_EMPTY


class InvalidName(FSError):
    kind = ErrorKind.INVALID_NAME
