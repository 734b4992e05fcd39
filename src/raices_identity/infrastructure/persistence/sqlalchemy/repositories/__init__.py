# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy repository implementations for identity management."""

from raices_identity.infrastructure.persistence.sqlalchemy.repositories.password_reset_code_repository import (
    PasswordResetCodeRepositorySQLAlchemy,
)
from raices_identity.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "PasswordResetCodeRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
]
