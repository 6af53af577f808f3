# exceptions.py
from fastapi import status


class AppError(Exception):
    """Base error translated once into the {success: false, error} envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, field: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """User-correctable input problem on a single field."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: str):
        super().__init__(message, field=field)


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class TokenError(AuthError):
    """Malformed, expired, badly signed or superseded token."""


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class CsrfError(ForbiddenError):
    pass


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """Duplicate value on a unique field, or a delete blocked by dependents."""

    status_code = status.HTTP_400_BAD_REQUEST


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after
