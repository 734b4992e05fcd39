"""SQLAlchemy implementation for raices_identity persistence.

Provides:
- Base: Declarative base for identity models
- UserModel: SQLAlchemy model for users
- PasswordResetCodeModel: SQLAlchemy model for password reset codes
- UserRepositorySQLAlchemy: Repository implementation for users
- PasswordResetCodeRepositorySQLAlchemy: Repository implementation for reset codes
"""

from raices_identity.infrastructure.persistence.sqlalchemy.base import Base, TimestampMixin
from raices_identity.infrastructure.persistence.sqlalchemy.models import (
    PasswordResetCodeModel,
    UserModel,
)
from raices_identity.infrastructure.persistence.sqlalchemy.repositories import (
    PasswordResetCodeRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "PasswordResetCodeModel",
    "PasswordResetCodeRepositorySQLAlchemy",
    "TimestampMixin",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
