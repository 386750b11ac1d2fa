"""
Error hierarchy for the Jobly API.

Every expected failure is raised as an AppError subclass carrying its HTTP
status. The global handlers in app.api.error_handlers turn them into
``{"error": {"message": ..., "status": ...}}`` responses; anything else
becomes a 500.
"""

from typing import Any


class AppError(Exception):
    """Base exception for all request-level errors."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Any = None):
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {
            "error": {
                "message": self.message,
                "status": self.status_code,
            }
        }


class BadRequestError(AppError):
    """Malformed or contradictory input (empty update, inverted bounds, duplicates)."""
    status_code = 400
    default_message = "Bad Request"


class UnauthorizedError(AppError):
    """Missing or insufficient identity."""
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(AppError):
    """Operation targets a primary key or reference that does not exist."""
    status_code = 404
    default_message = "Not Found"
