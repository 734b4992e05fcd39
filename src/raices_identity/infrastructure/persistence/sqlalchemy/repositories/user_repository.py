"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from raices_identity.domain.shared.time import ensure_tz_aware, utc_now
from raices_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    UserRepository,
    normalize_email,
)
from raices_identity.exceptions import DependencyUnavailableError
from raices_identity.infrastructure.persistence.sqlalchemy.models import (
    PasswordResetCodeModel,
    UserModel,
)

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else normalize_email(email)

        stmt = select(UserModel).where(UserModel.email == email_value)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise _unavailable("find_by_email", e) from e
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def add(self, user: User) -> None:
        self._session.add(self._map_to_model(user))

        try:
            await self._session.flush()
        except IntegrityError as e:
            if "email" in str(e).lower() or "unique" in str(e).lower():
                raise EmailAlreadyExistsError(user.email) from e
            raise _unavailable("add", e) from e
        except SQLAlchemyError as e:
            raise _unavailable("add", e) from e

        logger.info("Created user: %s", user.id)

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _unavailable("update_password_hash", e) from e

        return result.rowcount == 1  # type: ignore[attr-defined]

    async def delete(self, user_id: UUID) -> None:
        try:
            await self._session.execute(
                delete(PasswordResetCodeModel).where(
                    PasswordResetCodeModel.user_id == user_id,
                ),
            )
            await self._session.execute(delete(UserModel).where(UserModel.id == user_id))
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _unavailable("delete", e) from e

        logger.info("Deleted user: %s", user_id)

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise _unavailable("find_by_id", e) from e
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            password_hash=model.password_hash,
            is_seller=model.is_seller,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            password_hash=user.password_hash,
            is_seller=user.is_seller,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


def _unavailable(operation: str, error: Exception) -> DependencyUnavailableError:
    logger.error("User store failure during %s: %s", operation, error)
    return DependencyUnavailableError(details={"operation": operation})
