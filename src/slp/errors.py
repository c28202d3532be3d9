"""Application error taxonomy.

Every error carries the HTTP status and the client-facing message it is
rendered with by the global error handler. Messages are generic:
internal details go to the log, never to the response body.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code: int = 500
    detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class Unauthorized(AppError):
    """No credential was presented."""

    status_code = 401
    detail = "Authentication required"


class Forbidden(AppError):
    """A credential was presented but is invalid, expired, or not sufficient."""

    status_code = 403
    detail = "Invalid or expired token"


class InvalidCredentials(AppError):
    """Login failed. Unknown username and wrong password are indistinguishable."""

    status_code = 401
    detail = "Invalid credentials"


class DataAccessError(AppError):
    """Any persistence failure."""

    status_code = 500
    detail = "Database error"


class NotFoundError(AppError):
    status_code = 404
    detail = "Not found"


class ConflictError(AppError):
    status_code = 409
    detail = "Conflict"


class ValidationFailed(AppError):
    status_code = 400
    detail = "Invalid request"
