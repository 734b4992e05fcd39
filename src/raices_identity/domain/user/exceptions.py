"""User domain exceptions."""

from raices_identity.exceptions import ErrorCode, IdentityError


class InvalidEmailError(IdentityError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR)


class EmailAlreadyExistsError(IdentityError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "Email is already registered",
            ErrorCode.EMAIL_CONFLICT,
            {"email": email},
        )


class UserNotFoundError(IdentityError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            "User not found",
            ErrorCode.USER_NOT_FOUND,
            {"user_id": user_id},
        )
