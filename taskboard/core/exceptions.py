"""
Domain exceptions.

Every error the authorization core and the resource services raise on
purpose derives from AppError. Each subclass maps to exactly one HTTP
status so clients can tell "you don't have access" (403) apart from
"who are you" (401), "it isn't there" (404) and "the system is broken" (500).

Usage:
    raise NotFoundError(f"Task with ID {task_id} not found")
    raise ForbiddenError("You can only update your own tasks")
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors rendered by the API exception handler."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "An error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message, "detail": self.message}


class UnauthenticatedError(AppError):
    """No valid principal on the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthenticated"
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    """Principal is known but lacks the required permission, role or ownership."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    """Referenced user, role, permission, resource or membership does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = "Resource not found"


class ConflictError(AppError):
    """Uniqueness violation (duplicate membership, duplicate email)."""

    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
    default_message = "Resource already exists"


class InvalidInputError(AppError):
    """Malformed input to a resolver or guard call (caller error)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_input"
    default_message = "Invalid input"


class InternalError(AppError):
    """Unexpected storage or system failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "internal_error"
    default_message = "Internal error"
