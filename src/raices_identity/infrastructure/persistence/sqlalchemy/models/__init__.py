# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for identity management."""

from raices_identity.infrastructure.persistence.sqlalchemy.models.password_reset_code_model import (
    PasswordResetCodeModel,
)
from raices_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = [
    "PasswordResetCodeModel",
    "UserModel",
]
