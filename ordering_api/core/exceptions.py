"""
Application Error Taxonomy

Services raise these exceptions; the FastAPI exception handlers in
``ordering_api.main`` turn them into JSON responses. Every error carries the
HTTP status it maps to and a machine-readable error code.
"""

from typing import Optional

from fastapi import status


class OrderingError(Exception):
    """Base class for all errors the API reports to clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "SERVER_ERROR"
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, error_code: Optional[str] = None):
        self.message = message or self.default_message
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)


class ValidationError(OrderingError):
    """Client input is malformed or incomplete."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Missing required fields"


class ConflictError(OrderingError):
    """A unique field is already taken.

    Reported as 400 to keep the public contract of the registration endpoint.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "CONFLICT"
    default_message = "Resource already exists"


class AuthError(OrderingError):
    """Bad credentials, or a missing, invalid or expired session token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_FAILED"
    default_message = "Invalid or expired token"


class NotFoundError(OrderingError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ServerError(OrderingError):
    """Data-store or unexpected failure. The cause stays in the server log."""
