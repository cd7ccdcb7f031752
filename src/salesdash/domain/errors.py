from __future__ import annotations


class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    """Form input rejected before any backend call.

    ``field_errors`` maps a form field to the message shown next to it.
    """

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class SelectionError(AppError):
    pass


class ApiError(AppError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class AuthenticationError(ApiError):
    pass


class NotFoundError(ApiError):
    pass
