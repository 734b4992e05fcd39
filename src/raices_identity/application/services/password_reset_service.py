import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from raices_auth import PasswordHashingService, ResetCodeGenerator, WeakPasswordError
from raices_identity.domain.shared.time import utc_now
from raices_identity.domain.user import (
    Email,
    InvalidEmailError,
    User,
    UserRepository,
)
from raices_identity.exceptions import (
    InvalidPasswordError,
    InvalidResetCodeError,
    ResetCodeExpiredError,
)
from raices_identity.infrastructure.email import EmailService
from raices_identity.repositories import (
    PasswordResetCodeData,
    PasswordResetCodeRepository,
)

logger = logging.getLogger(__name__)

# Same message whether or not the account exists
RESET_REQUESTED_MESSAGE = "If the email is registered, a recovery code has been sent"
CODE_VERIFIED_MESSAGE = "Code verified"
PASSWORD_RESET_MESSAGE = "Password updated successfully"


class PasswordResetService:
    """Service for the request, verify and reset steps of password recovery."""

    CODE_EXPIRY_MINUTES = 15

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        code_repository: PasswordResetCodeRepository,
        password_service: PasswordHashingService,
        email_service: EmailService,
        code_generator: ResetCodeGenerator | None = None,
        code_expiry_minutes: int = CODE_EXPIRY_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_repo = user_repository
        self._code_repo = code_repository
        self._password_service = password_service
        self._email_service = email_service
        self._code_generator = code_generator or ResetCodeGenerator()
        self._code_expiry = timedelta(minutes=code_expiry_minutes)
        self._clock = clock

    async def _find_user(self, email: str) -> User | None:
        try:
            return await self._user_repo.find_by_email(Email(email))
        except InvalidEmailError:
            return None

    async def request_reset(self, email: str) -> str:
        """Send a fresh reset code to the account's email.

        Any earlier unused code of the account stops working. The returned
        message does not reveal whether the account exists.

        Raises
        ------
        EmailDeliveryError
            If the account exists but the code could not be delivered
        """
        user = await self._find_user(email)
        if user is None:
            logger.debug("Password reset requested for unknown email")
            return RESET_REQUESTED_MESSAGE

        code = self._code_generator.generate()
        expires_at = self._clock() + self._code_expiry

        invalidated = await self._code_repo.invalidate_all_unused(user.id)
        await self._code_repo.insert(user.id, code, expires_at)
        if invalidated:
            logger.debug("Invalidated %d earlier reset code(s) for %s", invalidated, user.id)

        await self._email_service.send_password_reset_code(
            to_email=user.email,
            code=code,
            user_name=user.full_name,
        )
        logger.info("Password reset code sent to user: %s", user.id)
        return RESET_REQUESTED_MESSAGE

    async def _check_code(self, email: str, code: str) -> tuple[User, PasswordResetCodeData]:
        user = await self._find_user(email)
        if user is None:
            raise InvalidResetCodeError

        reset_code = await self._code_repo.find_valid(user.id, code)
        if reset_code is None:
            raise InvalidResetCodeError

        if reset_code.is_expired(self._clock()):
            raise ResetCodeExpiredError

        return user, reset_code

    async def verify_code(self, email: str, code: str) -> str:
        """Check a code without consuming it.

        Raises
        ------
        InvalidResetCodeError
            If the account or an unused matching code does not exist
        ResetCodeExpiredError
            If the matching code has expired
        """
        await self._check_code(email, code)
        return CODE_VERIFIED_MESSAGE

    async def reset_password(self, email: str, code: str, new_password: str) -> str:
        """Consume a code and set a new password.

        Raises
        ------
        InvalidResetCodeError
            If the code is unknown or another request consumed it first
        ResetCodeExpiredError
            If the matching code has expired
        InvalidPasswordError
            If the new password cannot be hashed
        """
        user, reset_code = await self._check_code(email, code)

        try:
            new_hash = await asyncio.to_thread(self._password_service.hash, new_password)
        except WeakPasswordError as e:
            raise InvalidPasswordError(e.message) from e

        # Claim the code first; a concurrent reset with the same code loses here
        if not await self._code_repo.mark_used(reset_code.id):
            raise InvalidResetCodeError

        await self._user_repo.update_password_hash(user.id, new_hash)
        logger.info("Password reset completed for user: %s", user.id)
        return PASSWORD_RESET_MESSAGE
