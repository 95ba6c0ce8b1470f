"""
Error taxonomy shared by services and the HTTP layer.

Services raise one of these; the exception handlers registered in
``app.main`` turn them into ``{"success": false, "message": ...}`` responses
with the matching status code.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        # Diagnostic text, only exposed in development
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Token required"


class InvalidToken(Unauthenticated):
    status_code = 403
    default_message = "Invalid token"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden: Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    status_code = 500
