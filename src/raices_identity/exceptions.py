"""Identity exceptions and error codes.

Every failure the identity layer reports inherits from IdentityError so the
presentation layer can translate it into a response in one place.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_OR_EXPIRED_CODE = "INVALID_OR_EXPIRED_CODE"
    CODE_EXPIRED = "CODE_EXPIRED"

    # Authentication Errors (401)
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    OAUTH_FAILURE = "OAUTH_FAILURE"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Authorization Errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not Found Errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Conflict Errors (409)
    EMAIL_CONFLICT = "EMAIL_CONFLICT"

    # Upstream Errors (502/503)
    DELIVERY_FAILED = "DELIVERY_FAILED"
    DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

    # General Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class IdentityError(Exception):
    """Base exception for all identity-related errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged but not exposed to users)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class InvalidCredentialsError(IdentityError):
    """Raised when email or password is incorrect during login.

    The same error is used for an unknown email and a wrong password.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class OAuthFailureError(IdentityError):
    """Raised when the OAuth provider returns no usable identity."""

    def __init__(self, message: str = "Google authentication failed"):
        super().__init__(message, ErrorCode.OAUTH_FAILURE)


class UnauthorizedError(IdentityError):
    """Raised when a request carries no valid session."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, ErrorCode.UNAUTHORIZED)


class SellerRequiredError(IdentityError):
    """Raised when a non-seller hits a seller-only resource."""

    def __init__(self, message: str = "Seller account required"):
        super().__init__(message, ErrorCode.FORBIDDEN)


class InvalidResetCodeError(IdentityError):
    """Raised when no unused reset code matches the email and code."""

    def __init__(self, message: str = "Invalid or already used code"):
        super().__init__(message, ErrorCode.INVALID_OR_EXPIRED_CODE)


class ResetCodeExpiredError(IdentityError):
    """Raised when the matching reset code is past its expiry."""

    def __init__(self, message: str = "The code has expired"):
        super().__init__(message, ErrorCode.CODE_EXPIRED)


class EmailDeliveryError(IdentityError):
    """Raised when the email provider rejects or never receives a message."""

    def __init__(
        self,
        message: str = "Could not send the email",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, ErrorCode.DELIVERY_FAILED, details)


class DependencyUnavailableError(IdentityError):
    """Raised when the user or reset code store cannot be reached."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, ErrorCode.DEPENDENCY_UNAVAILABLE, details)


class InvalidPasswordError(IdentityError):
    """Raised when a new password cannot be accepted by the hasher."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message, ErrorCode.VALIDATION_ERROR)
