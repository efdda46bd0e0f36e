"""
Application Error Types

Domain exceptions raised by the service layer. Each carries the HTTP status
and a machine-readable code; ``app.main`` registers a handler that renders
them as the standard error body:

    {"success": false, "error": "NotFoundError", "message": "...", "code": "NOT_FOUND_ERROR"}
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors the API reports to clients."""

    status_code: int = 500
    code: Optional[str] = None

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        """Convert to the JSON error body."""
        return {
            "success": False,
            "error": type(self).__name__,
            "message": self.message,
            "code": self.code,
        }


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND_ERROR"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT_ERROR"

    def __init__(self, message: str = "A record with this value already exists"):
        super().__init__(message)
