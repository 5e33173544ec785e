"""
Domain Errors

Every failure a service can raise on purpose derives from TiffinError and
carries the HTTP status the API layer answers with. Anything else that
escapes a handler is reported as a 500.
"""

from typing import Optional


class TiffinError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code: int = 400
    default_message: str = "request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(TiffinError):
    """A required field is missing or a value is not acceptable."""
    status_code = 400
    default_message = "invalid input"


class Conflict(TiffinError):
    """An account with the same identity already exists."""
    status_code = 400
    default_message = "already exists"


class InvalidCredentials(TiffinError):
    """Unknown email or wrong password. Both cases share one message."""
    status_code = 400
    default_message = "invalid credentials"


class Unauthenticated(TiffinError):
    status_code = 401
    default_message = "unauthenticated"


class Forbidden(TiffinError):
    status_code = 403
    default_message = "forbidden"


class NotFound(TiffinError):
    status_code = 404
    default_message = "not found"
