# jrdriving/errors.py
"""
Domain errors raised by services and rendered by the handlers in main.py.
Every error maps to one HTTP status and carries a human-readable message.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid data"

    def __init__(self, message: Optional[str] = None, fields: Optional[dict] = None):
        super().__init__(message)
        self.fields = fields or {}

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.fields:
            body["fields"] = self.fields
        return body


class InvalidTransition(ValidationError):
    default_message = "Status transition not allowed"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authenticated"


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid email or password"


class InvalidToken(Unauthenticated):
    default_message = "Invalid or expired session"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"
