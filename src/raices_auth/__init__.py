"""Raíces Auth - Generic authentication infrastructure.

This package provides authentication building blocks that are independent
of the marketplace's user model. It handles:
- Password hashing (bcrypt)
- Session token creation and verification (JWT, HS256)
- One-time reset code generation

Architecture:
    raices_auth/
    ├── services/           # Pure logic (password hashing, JWT, reset codes)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions
"""

from raices_auth.exceptions import (
    AuthError,
    InvalidTokenError,
    WeakPasswordError,
)
from raices_auth.schemas import SessionClaims
from raices_auth.services import (
    JWTService,
    PasswordHashingService,
    ResetCodeGenerator,
)

__all__ = [
    # Services
    "JWTService",
    "PasswordHashingService",
    "ResetCodeGenerator",
    # Schemas
    "SessionClaims",
    # Exceptions
    "AuthError",
    "InvalidTokenError",
    "WeakPasswordError",
]
