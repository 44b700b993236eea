"""
Application errors. Each carries the HTTP status it maps to; main.py
renders all of them as a JSON body of the form {"message": ..., "error": ...}.
"""
from typing import Any, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, error: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(AppError):
    """A required field is missing or refers to a row that does not exist."""
    status_code = 400


class AuthError(AppError):
    status_code = 401


class ForbiddenError(AuthError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    """Storage or connectivity failure; the cause is logged, never returned."""
    status_code = 500
