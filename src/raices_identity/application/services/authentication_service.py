"""Authentication service for registration, login and session checks."""

from __future__ import annotations

import asyncio
import logging
import secrets
from typing import TYPE_CHECKING
from uuid import UUID

from raices_auth import (
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    WeakPasswordError,
)
from raices_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    User,
    UserNotFoundError,
)
from raices_identity.exceptions import (
    InvalidCredentialsError,
    InvalidPasswordError,
    OAuthFailureError,
    UnauthorizedError,
)
from raices_identity.schemas import AuthResult, OAuthIdentity

if TYPE_CHECKING:
    from raices_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)

LOGOUT_MESSAGE = "Logged out successfully"


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates raices_auth infrastructure (password hashing, session
    tokens) with the User domain to provide:
    - Registration with email and password
    - Login with password
    - Login through an external OAuth identity
    - Session validation for protected requests

    Hashing runs in a worker thread so a slow bcrypt round does not block
    the event loop.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service

    def _issue_session(self, user: User, created: bool = False) -> AuthResult:
        access_token = self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
            is_seller=user.is_seller,
        )
        claims = self._jwt_service.verify_token(access_token)
        return AuthResult(
            user=user,
            access_token=access_token,
            claims=claims,
            created=created,
        )

    async def _hash_password(self, password: str) -> str:
        try:
            return await asyncio.to_thread(self._password_service.hash, password)
        except WeakPasswordError as e:
            raise InvalidPasswordError(e.message) from e

    async def register(
        self,
        email: str,
        full_name: str,
        password: str,
        is_seller: bool = False,
    ) -> AuthResult:
        email_obj = Email(email)

        existing_user = await self._user_repo.find_by_email(email_obj)
        if existing_user is not None:
            raise EmailAlreadyExistsError(email_obj.value)

        password_hash = await self._hash_password(password)
        user = User.create(
            email_obj,
            full_name=full_name,
            password_hash=password_hash,
            is_seller=is_seller,
        )
        # A concurrent registration surfaces here as EmailAlreadyExistsError
        await self._user_repo.add(user)

        logger.info("User registered: %s (seller: %s)", user.id, is_seller)
        return self._issue_session(user, created=True)

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            user = await self._user_repo.find_by_email(Email(email))
        except InvalidEmailError:
            user = None

        if user is None:
            # Same bcrypt cost as a real check so timing does not reveal accounts
            await asyncio.to_thread(self._verify_against_dummy, password)
            raise InvalidCredentialsError

        matches = await asyncio.to_thread(
            self._password_service.verify,
            password,
            user.password_hash,
        )
        if not matches:
            logger.info("Failed login for user: %s", user.id)
            raise InvalidCredentialsError

        logger.info("User logged in: %s", user.id)
        return self._issue_session(user)

    def _verify_against_dummy(self, password: str) -> None:
        self._password_service.verify(password, self._password_service.dummy_hash)

    async def oauth_login(self, identity: OAuthIdentity | None) -> AuthResult:
        """Sign in with an identity asserted by an OAuth provider.

        Unknown emails get a new non-seller account with a random,
        never-disclosed password.

        Raises
        ------
        OAuthFailureError
            If no identity was provided
        """
        if identity is None:
            raise OAuthFailureError

        try:
            email_obj = Email(identity.email)
        except InvalidEmailError as e:
            raise OAuthFailureError from e

        user = await self._user_repo.find_by_email(email_obj)
        if user is not None:
            logger.info("User logged in via %s: %s", identity.provider, user.id)
            return self._issue_session(user)

        password_hash = await self._hash_password(secrets.token_urlsafe(32))
        user = User.create(
            email_obj,
            full_name=identity.full_name,
            password_hash=password_hash,
            is_seller=False,
        )
        await self._user_repo.add(user)

        logger.info("User registered via %s: %s", identity.provider, user.id)
        return self._issue_session(user, created=True)

    def logout(self) -> str:
        """End a session.

        Sessions are stateless, so there is nothing to revoke server-side.
        The caller clears the client's cookie.
        """
        return LOGOUT_MESSAGE

    async def validate_user(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def authenticate_token(self, token: str | None) -> User:
        """Resolve a session token to its current account.

        Raises
        ------
        UnauthorizedError
            If the token is missing, invalid, expired, or names an account
            that no longer exists
        """
        if not token:
            raise UnauthorizedError

        try:
            claims = self._jwt_service.verify_token(token)
        except InvalidTokenError as e:
            logger.debug("Rejected session token: %s", e.message)
            raise UnauthorizedError from e

        try:
            return await self.validate_user(claims.subject_id)
        except UserNotFoundError as e:
            raise UnauthorizedError from e
