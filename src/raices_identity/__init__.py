"""Raíces Identity - Marketplace accounts, authentication and password recovery.

This package handles all identity-related concerns:
- User accounts (email, display name, seller flag)
- Authentication (registration, login, Google sign-in, session checks)
- Password recovery with one-time emailed codes
- Persistence of users and reset codes (SQLAlchemy)
- Transactional email delivery (Brevo)
"""

from raices_identity.exceptions import (
    DependencyUnavailableError,
    EmailDeliveryError,
    ErrorCode,
    IdentityError,
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidResetCodeError,
    OAuthFailureError,
    ResetCodeExpiredError,
    SellerRequiredError,
    UnauthorizedError,
)
from raices_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    User,
    UserNotFoundError,
    UserRepository,
)
from raices_identity.repositories import (
    PasswordResetCodeData,
    PasswordResetCodeRepository,
)
from raices_identity.schemas import AuthResult, OAuthIdentity
from raices_identity.application.services import (
    AuthenticationService,
    PasswordResetService,
)

__all__ = [
    "AuthResult",
    "AuthenticationService",
    "DependencyUnavailableError",
    "Email",
    "EmailAlreadyExistsError",
    "EmailDeliveryError",
    "ErrorCode",
    "IdentityError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidPasswordError",
    "InvalidResetCodeError",
    "OAuthFailureError",
    "OAuthIdentity",
    "PasswordResetCodeData",
    "PasswordResetCodeRepository",
    "PasswordResetService",
    "ResetCodeExpiredError",
    "SellerRequiredError",
    "UnauthorizedError",
    "User",
    "UserNotFoundError",
    "UserRepository",
]
