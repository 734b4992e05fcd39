"""SQLAlchemy implementation of PasswordResetCodeRepository."""

import logging
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from raices_identity.domain.shared.time import ensure_tz_aware, utc_now
from raices_identity.exceptions import DependencyUnavailableError
from raices_identity.infrastructure.persistence.sqlalchemy.models import (
    PasswordResetCodeModel,
    UserModel,
)
from raices_identity.repositories import (
    PasswordResetCodeData,
    PasswordResetCodeRepository,
)

logger = logging.getLogger(__name__)


class PasswordResetCodeRepositorySQLAlchemy(PasswordResetCodeRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def invalidate_all_unused(self, user_id: UUID) -> int:
        # Row lock on the owner serializes concurrent requests for one user.
        # SQLite ignores FOR UPDATE; its single writer lock does the same job.
        lock_stmt = select(UserModel.id).where(UserModel.id == user_id).with_for_update()
        stmt = (
            update(PasswordResetCodeModel)
            .where(
                PasswordResetCodeModel.user_id == user_id,
                PasswordResetCodeModel.used.is_(False),
            )
            .values(used=True)
            .execution_options(synchronize_session=False)
        )
        try:
            await self._session.execute(lock_stmt)
            result = await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _unavailable("invalidate_all_unused", e) from e

        return result.rowcount  # type: ignore[attr-defined]

    async def insert(
        self,
        user_id: UUID,
        code: str,
        expires_at: datetime,
    ) -> PasswordResetCodeData:
        model = PasswordResetCodeModel(
            id=uuid4(),
            user_id=user_id,
            code=code,
            expires_at=expires_at,
            used=False,
            created_at=utc_now(),
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _unavailable("insert", e) from e

        return self._map_to_data(model)

    async def find_valid(self, user_id: UUID, code: str) -> PasswordResetCodeData | None:
        stmt = select(PasswordResetCodeModel).where(
            PasswordResetCodeModel.user_id == user_id,
            PasswordResetCodeModel.code == code,
            PasswordResetCodeModel.used.is_(False),
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise _unavailable("find_valid", e) from e
        model = result.scalars().first()

        if model is None:
            return None

        return self._map_to_data(model)

    async def mark_used(self, code_id: UUID) -> bool:
        stmt = (
            update(PasswordResetCodeModel)
            .where(
                PasswordResetCodeModel.id == code_id,
                PasswordResetCodeModel.used.is_(False),
            )
            .values(used=True)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _unavailable("mark_used", e) from e

        return result.rowcount == 1  # type: ignore[attr-defined]

    async def delete_expired(self, before: datetime) -> int:
        stmt = (
            delete(PasswordResetCodeModel)
            .where(PasswordResetCodeModel.expires_at < before)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise _unavailable("delete_expired", e) from e

        return result.rowcount  # type: ignore[attr-defined]

    def _map_to_data(self, model: PasswordResetCodeModel) -> PasswordResetCodeData:
        return PasswordResetCodeData(
            id=model.id,
            user_id=model.user_id,
            code=model.code,
            expires_at=ensure_tz_aware(model.expires_at),
            used=model.used,
            created_at=ensure_tz_aware(model.created_at),
        )


def _unavailable(operation: str, error: Exception) -> DependencyUnavailableError:
    logger.error("Reset code store failure during %s: %s", operation, error)
    return DependencyUnavailableError(details={"operation": operation})
