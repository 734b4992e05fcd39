"""Abstract repository interfaces for identity management."""

from raices_identity.repositories.password_reset_code_repository import (
    PasswordResetCodeData,
    PasswordResetCodeRepository,
)

__all__ = [
    "PasswordResetCodeData",
    "PasswordResetCodeRepository",
]
