"""User domain manages marketplace identity.

This domain handles:
- User aggregate (id, email, display name, password hash, seller flag)
- Email normalization and validation
- The repository contract used by the authentication services
"""

from raices_identity.domain.user.aggregates import User
from raices_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    UserNotFoundError,
)
from raices_identity.domain.user.repositories import UserRepository
from raices_identity.domain.user.value_objects import Email, normalize_email

__all__ = [
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "normalize_email",
]
