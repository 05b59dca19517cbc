"""Application error taxonomy shared by services and API handlers."""

from enum import Enum

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in the response envelope."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    """Base class for errors that map onto an envelope response."""

    code: ErrorCode = ErrorCode.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[str] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.code]


class ValidationError(AppError):
    code = ErrorCode.VALIDATION_ERROR
    default_message = "Validation failed"


class ConflictError(AppError):
    code = ErrorCode.CONFLICT
    default_message = "Resource already exists"


class UnauthenticatedError(AppError):
    code = ErrorCode.UNAUTHENTICATED
    default_message = "Invalid authentication credentials"


class ForbiddenError(AppError):
    code = ErrorCode.FORBIDDEN
    default_message = "Access denied"


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


def code_for_status(status_code: int) -> ErrorCode:
    """Map a bare HTTP status (e.g. from routing) onto the closest error code."""
    for code, mapped in STATUS_CODES.items():
        if mapped == status_code:
            return code
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return ErrorCode.NOT_FOUND
    if 400 <= status_code < 500:
        return ErrorCode.VALIDATION_ERROR
    return ErrorCode.INTERNAL
