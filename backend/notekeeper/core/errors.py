# notekeeper/core/errors.py
"""
Structured API errors.

Services raise these instead of returning error payloads. The exception
handlers registered in `notekeeper.main` turn every ApiError into the standard
response envelope, so a route never has to build an error response itself.

Usage:
    from notekeeper.core.errors import NotFoundError
    raise NotFoundError("Note not found")
"""
from typing import Any, Optional

from fastapi import status


class ApiError(Exception):
    """
    Base error carrying an HTTP status code and a human readable message.

    Args:
        status_code: HTTP status to respond with
        message: Message placed in the envelope's "message" field
        errors: Optional list of detail items (e.g. validation errors)
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        errors: Optional[list[Any]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_code}, {self.message!r})"


class BadRequestError(ApiError):
    """400: malformed or missing input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class UnauthorizedError(ApiError):
    """401: missing, invalid or mismatched credentials or tokens."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized Request"


class ForbiddenError(ApiError):
    """403: authenticated, but not the owner of the resource."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ApiError):
    """404: resource absent."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class ConflictError(ApiError):
    """409: uniqueness violation or lost concurrent update."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class PayloadTooLargeError(ApiError):
    """413: request body over the configured size limit."""
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_message = "Request body too large"


class InternalError(ApiError):
    """500: persistence or invariant failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"
