"""Reset code guarantees under real concurrency on PostgreSQL."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from raices_auth import PasswordHashingService
from raices_identity import InvalidResetCodeError, PasswordResetService, User
from raices_identity.domain.shared.time import utc_now
from raices_identity.infrastructure.email import EmailService
from raices_identity.infrastructure.persistence.sqlalchemy import (
    PasswordResetCodeModel,
    PasswordResetCodeRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

TEST_EMAIL = "concurrente@example.com"


@pytest.fixture
def pg_session_maker(postgres_engine):
    return async_sessionmaker(postgres_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def email_service():
    service = Mock(spec=EmailService)
    service.send_password_reset_code = AsyncMock()
    return service


async def _seed_user(session_maker) -> User:
    user = User.create(TEST_EMAIL, "Concurrente", "hash")
    async with session_maker() as session:
        await UserRepositorySQLAlchemy(session).add(user)
        await session.commit()
    return user


def _reset_service(session, email_service) -> PasswordResetService:
    return PasswordResetService(
        user_repository=UserRepositorySQLAlchemy(session),
        code_repository=PasswordResetCodeRepositorySQLAlchemy(session),
        password_service=PasswordHashingService(rounds=4),
        email_service=email_service,
    )


@pytest.mark.integration
class TestPostgresResetCodes:
    @pytest.mark.asyncio
    async def test_concurrent_requests_leave_one_unused_code(self, pg_session_maker, email_service):
        user = await _seed_user(pg_session_maker)

        async def request():
            async with pg_session_maker() as session:
                await _reset_service(session, email_service).request_reset(TEST_EMAIL)
                await session.commit()

        await asyncio.gather(*(request() for _ in range(5)))

        async with pg_session_maker() as session:
            unused = await session.scalar(
                select(func.count())
                .select_from(PasswordResetCodeModel)
                .where(
                    PasswordResetCodeModel.user_id == user.id,
                    PasswordResetCodeModel.used.is_(False),
                ),
            )
        assert unused == 1

    @pytest.mark.asyncio
    async def test_concurrent_resets_consume_code_once(self, pg_session_maker, email_service):
        user = await _seed_user(pg_session_maker)
        async with pg_session_maker() as session:
            await PasswordResetCodeRepositorySQLAlchemy(session).insert(
                user.id,
                "482913",
                utc_now() + timedelta(minutes=15),
            )
            await session.commit()

        async def reset(new_password: str) -> str:
            async with pg_session_maker() as session:
                service = _reset_service(session, email_service)
                await service.reset_password(TEST_EMAIL, "482913", new_password)
                await session.commit()
            return new_password

        results = await asyncio.gather(
            reset("primera1"),
            reset("segunda2"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InvalidResetCodeError)

        (winner,) = [r for r in results if isinstance(r, str)]
        loser = "segunda2" if winner == "primera1" else "primera1"
        async with pg_session_maker() as session:
            stored = await UserRepositorySQLAlchemy(session).find_by_id(user.id)
        hasher = PasswordHashingService(rounds=4)
        assert hasher.verify(winner, stored.password_hash)
        assert not hasher.verify(loser, stored.password_hash)

    @pytest.mark.asyncio
    async def test_partial_unique_index_allows_many_used_codes(self, pg_session_maker):
        user = await _seed_user(pg_session_maker)
        expires_at = utc_now() + timedelta(minutes=15)

        async with pg_session_maker() as session:
            repo = PasswordResetCodeRepositorySQLAlchemy(session)
            for code in ("111111", "222222", "333333"):
                await repo.invalidate_all_unused(user.id)
                await repo.insert(user.id, code, expires_at)
            await session.commit()

            assert await repo.find_valid(user.id, "333333") is not None
            assert await repo.find_valid(user.id, "111111") is None
