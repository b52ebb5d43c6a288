"""
Identity Core Error Taxonomy

Domain objects and repositories raise these exceptions. Use cases catch
AppError at their boundary and turn it into a failed Result via `exc.error`.
"""

from typing import Optional

from identity_core.shared.result import Error


class AppError(Exception):
    """Base class for all identity core errors"""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        self.message = message
        self.reason = reason
        super().__init__(message)

    @property
    def error(self) -> Error:
        return Error(self.code, self.message, self.reason)


class ValidationError(AppError):
    """Malformed input: email format, password or name length"""

    code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    """Bad credentials, invalid/expired/revoked token, inactive account"""

    code = "AUTHENTICATION_ERROR"


class ReauthenticationRequiredError(AuthenticationError):
    """Refresh token was consumed but no replacement pair was persisted"""

    code = "REAUTHENTICATION_REQUIRED"

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            "Refresh token was consumed but new tokens could not be issued; "
            "please log in again",
            reason,
        )


class ConflictError(AppError):
    code = "CONFLICT"


class NotFoundError(AppError):
    code = "NOT_FOUND"


class InternalError(AppError):
    """Hashing, signing or persistence failure. Message is generic."""

    code = "INTERNAL_ERROR"
