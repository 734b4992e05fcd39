"""FastAPI dependency injection for the RaícesMX API.

Provides dependencies for:
- Database sessions
- Authentication and password reset services
- The current session's user (cookie or bearer token)
- Seller-only access
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from raices.presentation.api.config import get_api_settings
from raices_auth import JWTService, PasswordHashingService
from raices_config.settings import Settings
from raices_identity import (
    AuthenticationService,
    DependencyUnavailableError,
    PasswordResetService,
    SellerRequiredError,
    UnauthorizedError,
    User,
)
from raices_identity.infrastructure.email import EmailService
from raices_identity.infrastructure.persistence.sqlalchemy import (
    Base,
    PasswordResetCodeRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

# Cookie carrying the session token
ACCESS_TOKEN_COOKIE = "access_token"  # NOQA: S105

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


@lru_cache()
def get_database_url() -> str:
    url = get_api_settings().database_url
    # Ensure data directory exists for SQLite
    if url.startswith("sqlite") and ":memory:" not in url:
        db_path = url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return url


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    The engine manages the connection pool and is reused across all requests.
    """
    return create_async_engine(
        get_database_url(),
        echo=False,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields
    ------
    AsyncSession for database operations. Routers own commit and rollback.
    """
    async with get_session_maker()() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


async def commit_session(session: AsyncSession) -> None:
    """
    Commit the request's unit of work.

    Raises
    ------
    DependencyUnavailableError
        If the database rejects the commit
    """
    try:
        await session.commit()
    except SQLAlchemyError as e:
        logger.error("Database commit failed: %s", e)
        raise DependencyUnavailableError(details={"operation": "commit"}) from e


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create all database tables (idempotent)."""
    engine = engine or get_engine()
    logger.info("Ensuring all database tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema is up to date")


# -----------------------------------------------------------------------------
# Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        expire_days=settings.jwt_expire_days,
    )


@lru_cache()
def _password_service(rounds: int) -> PasswordHashingService:
    # Shared per work factor so the timing dummy hash is computed once
    return PasswordHashingService(rounds=rounds)


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return _password_service(settings.bcrypt_rounds)


def get_email_service(settings: SettingsDep) -> EmailService:
    return EmailService(settings)


async def get_authentication_service(
    session: DBSession,
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
) -> AuthenticationService:
    """Get authentication service bound to the request's session."""
    return AuthenticationService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
        jwt_service=jwt_service,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


async def get_password_reset_service(
    session: DBSession,
    settings: SettingsDep,
    password_service: PasswordHashingService = Depends(get_password_service),
    email_service: EmailService = Depends(get_email_service),
) -> PasswordResetService:
    return PasswordResetService(
        user_repository=UserRepositorySQLAlchemy(session),
        code_repository=PasswordResetCodeRepositorySQLAlchemy(session),
        password_service=password_service,
        email_service=email_service,
        code_expiry_minutes=settings.reset_code_expire_minutes,
    )


ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]


# -----------------------------------------------------------------------------
# Current User (session token)
# -----------------------------------------------------------------------------


def get_session_tokens(
    access_token: Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> list[str]:
    """Collect the request's session tokens, cookie first."""
    tokens = []
    if access_token:
        tokens.append(access_token)
    if credentials is not None:
        tokens.append(credentials.credentials)
    return tokens


async def get_current_user(
    auth_service: AuthService,
    tokens: list[str] = Depends(get_session_tokens),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    The cookie is tried first. A stale cookie does not hide a valid
    ``Authorization`` header sent with it.

    Raises
    ------
    UnauthorizedError
        If no token resolves to an existing account
    """
    *fallbacks, last = tokens or [None]
    for token in fallbacks:
        try:
            return await auth_service.authenticate_token(token)
        except UnauthorizedError:
            logger.debug("Session cookie rejected, trying the Authorization header")
    return await auth_service.authenticate_token(last)


# Type alias for injected current user
CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_seller(user: User = Depends(get_current_user)) -> User:
    """Require a seller account."""
    if not user.is_seller:
        raise SellerRequiredError
    return user


# Type alias for seller user
SellerUser = Annotated[User, Depends(require_seller)]
