"""Error types raised by the service layer.

Services raise these and never build HTTP responses; ``hrdesk.main`` maps each
class to its status code and a ``{"success": false, "message": ...}`` body.
"""
from __future__ import annotations


class AppError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 400
    default_message = "Validation error"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Unauthorized"


class TokenExpired(Unauthenticated):
    default_message = "Token expired"


class InvalidToken(Unauthenticated):
    default_message = "Invalid token"


class InvalidCredentials(Unauthenticated):
    default_message = "Password is incorrect"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"
