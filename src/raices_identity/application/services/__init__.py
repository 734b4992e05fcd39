from raices_identity.application.services.authentication_service import (
    LOGOUT_MESSAGE,
    AuthenticationService,
)
from raices_identity.application.services.password_reset_service import (
    CODE_VERIFIED_MESSAGE,
    PASSWORD_RESET_MESSAGE,
    RESET_REQUESTED_MESSAGE,
    PasswordResetService,
)

__all__ = [
    "CODE_VERIFIED_MESSAGE",
    "LOGOUT_MESSAGE",
    "PASSWORD_RESET_MESSAGE",
    "RESET_REQUESTED_MESSAGE",
    "AuthenticationService",
    "PasswordResetService",
]
