"""
Domain errors.

Services raise these; the handler registered in app.main renders them
as JSON with the class status code.
"""
from typing import Any, Optional


class CivicTrackError(Exception):
    """Base class for errors surfaced directly to the caller."""

    status_code = 500
    error = "Application Error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgumentError(CivicTrackError):
    """Argument outside its documented range."""

    status_code = 400
    error = "Invalid Argument"


class UnauthorizedError(CivicTrackError):
    status_code = 401
    error = "Unauthorized"


class ForbiddenError(CivicTrackError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(CivicTrackError):
    status_code = 404
    error = "Not Found"


class ConflictError(CivicTrackError):
    """Resource already exists (e.g. a second flag by the same user)."""

    status_code = 409
    error = "Conflict"
