"""Domain error taxonomy.

Services raise these; ``nativespeak.middleware.error_handler`` turns them
into the uniform JSON envelope ``{success, code, message, details?}``.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for errors that map to a known HTTP response."""

    status_code: int = 500
    code: str = "InternalFault"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: Any = None,  # noqa: ANN401
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400
    code = "ValidationError"
    default_message = "Invalid data"


class MissingCredential(AppError):
    status_code = 401
    code = "MissingCredential"
    default_message = "Authentication token not provided"


class InvalidCredential(AppError):
    """Bad, expired or malformed token, or a failed login."""

    status_code = 403
    code = "InvalidCredential"
    default_message = "Invalid or expired token"


class DuplicateIdentity(AppError):
    status_code = 400
    code = "DuplicateIdentity"
    default_message = "A user with this email already exists"


class NotFound(AppError):
    """Resource absent or not owned by the caller. Both look the same."""

    status_code = 404
    code = "NotFound"
    default_message = "Not found"


class TransientStoreFailure(AppError):
    """Database timeout or connectivity problem. Safe for the caller to retry."""

    status_code = 503
    code = "TransientStoreFailure"
    default_message = "Service temporarily unavailable, try again later"
