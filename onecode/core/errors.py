"""
Service error taxonomy

Every component either returns a typed result or raises one of these.
Routers never see store or transport exceptions directly.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    BAD_INPUT = "BAD_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    DUPLICATE = "DUPLICATE"


HTTP_STATUS_BY_KIND = {
    ErrorKind.BAD_INPUT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.ALREADY_PROCESSED: 409,
    ErrorKind.DUPLICATE: 422,
}


class ServiceError(Exception):
    kind: ErrorKind = ErrorKind.CONFLICT

    def __init__(self, message: str, hint: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_envelope(self, include_diagnostics: bool = False) -> dict:
        body = {"data": None, "message": self.message, "status": self.status_code}
        if include_diagnostics:
            body["kind"] = self.kind.value
            body["hint"] = self.hint
            body["details"] = self.details
        return body


class BadInput(ServiceError):
    """Malformed encoding, rejected payload or unsupported language"""
    kind = ErrorKind.BAD_INPUT


class Unauthorized(ServiceError):
    """No caller identity was forwarded"""
    kind = ErrorKind.UNAUTHORIZED


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND


class Conflict(ServiceError):
    """Any underlying store error; retryable by the caller"""
    kind = ErrorKind.CONFLICT


class AlreadyProcessed(ServiceError):
    """
    A concurrent request already created the row this call tried to create.
    Callers recover by re-reading the latest state.
    """
    kind = ErrorKind.ALREADY_PROCESSED


class Duplicate(ServiceError):
    kind = ErrorKind.DUPLICATE
