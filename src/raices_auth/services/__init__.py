"""Pure authentication services (no persistence)."""

from raices_auth.services.jwt_service import JWTService
from raices_auth.services.password_service import PasswordHashingService
from raices_auth.services.reset_code_service import ResetCodeGenerator

__all__ = [
    "JWTService",
    "PasswordHashingService",
    "ResetCodeGenerator",
]
