"""
Shared error types.

Every error carries the HTTP status it maps to; the API renders them all as
``{"error": message}``.
"""


class LegalProError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(LegalProError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(LegalProError):
    """Missing, malformed or expired session."""
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(LegalProError):
    """Login failed. Unknown email and wrong password are reported the same way."""
    status_code = 401
    default_message = "Invalid credentials"


class NotFound(LegalProError):
    """Record is missing or owned by someone else."""
    status_code = 404
    default_message = "Not found"


class DuplicateEmail(LegalProError):
    status_code = 409
    default_message = "Email already registered"


class ConflictError(LegalProError):
    """Update carried a stale version."""
    status_code = 409
    default_message = "Record was modified by another session"


class InvalidOrExpiredToken(LegalProError):
    status_code = 400
    default_message = "Invalid or expired token"


class ServerError(LegalProError):
    status_code = 500
