"""Application error taxonomy.

Every service raises a subclass of ``AppError``; routers turn them into
``HTTPException`` with ``http_error`` and the global handlers in
``src.main`` render the response envelope.
"""

from fastapi import HTTPException, status


class AppError(Exception):
    """Base application error."""

    code = "app_error"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Missing or malformed input."""

    code = "validation_error"

    def __init__(self, message: str = "All fields are required"):
        super().__init__(message)


class ConflictError(AppError):
    """Uniqueness violation."""

    code = "conflict"


class NotFoundError(AppError):
    """Key or index does not resolve."""

    code = "not_found"


class AuthError(AppError):
    """Credential mismatch."""

    code = "auth_error"


class StorageError(AppError):
    """Underlying document store unavailable or failed."""

    code = "storage_error"


STATUS_BY_CODE = {
    ValidationError.code: status.HTTP_400_BAD_REQUEST,
    ConflictError.code: status.HTTP_400_BAD_REQUEST,
    NotFoundError.code: status.HTTP_404_NOT_FOUND,
    AuthError.code: status.HTTP_400_BAD_REQUEST,
    StorageError.code: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: AppError) -> int:
    """Resolve the HTTP status of an error, following its class hierarchy."""
    for cls in type(error).__mro__:
        code = getattr(cls, "code", None)
        if code in STATUS_BY_CODE:
            return STATUS_BY_CODE[code]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(error: AppError) -> HTTPException:
    """Convert an application error to an HTTP exception."""
    return HTTPException(status_code=status_for(error), detail=error.message)


def require_fields(*values: object, message: str = "All fields are required") -> None:
    """Raise ``ValidationError`` if any value is None or a blank string."""
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)
