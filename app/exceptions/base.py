# ruff: noqa: D107
"""Base exception classes.

Every error kind is an ``HTTPException`` carrying a structured ``detail``
(message, error_code, details) that the global handler in ``app.main`` renders
into the error envelope. Subclasses only pick a status, a code and a default
message.
"""

from typing import Any

from fastapi import HTTPException, status


class BaseAppException(HTTPException):
    """Base application exception."""

    default_status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error_code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code or self.default_status_code,
            detail={
                "message": self.message,
                "error_code": self.error_code,
                "details": self.details,
            },
        )


class NotFoundError(BaseAppException):
    """The resource is absent or soft-deleted."""

    default_status_code = status.HTTP_404_NOT_FOUND
    default_error_code = "NOT_FOUND"
    default_message = "Resource not found"


class AppPermissionError(BaseAppException):
    """The caller exists but may not perform the operation."""

    default_status_code = status.HTTP_403_FORBIDDEN
    default_error_code = "PERMISSION_DENIED"
    default_message = "Permission denied"


class ConflictError(BaseAppException):
    """A write collides with existing state."""

    default_status_code = status.HTTP_409_CONFLICT
    default_error_code = "CONFLICT"
    default_message = "Resource already exists"


class ValidationError(BaseAppException):
    """A payload breaks a field constraint."""

    default_status_code = 422
    default_error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class DataAccessError(BaseAppException):
    """The store failed. The message never carries store internals."""

    default_error_code = "DATA_ACCESS_ERROR"
    default_message = "A data access error occurred"
