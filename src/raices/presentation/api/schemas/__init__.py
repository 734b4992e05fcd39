from raices.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RequestResetRequest,
    ResetPasswordRequest,
    UserResponse,
    VerifyCodeRequest,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProfileResponse",
    "RegisterRequest",
    "RequestResetRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "VerifyCodeRequest",
]
