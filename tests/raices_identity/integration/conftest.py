"""
Pytest configuration for raices_identity integration tests.

Persistence tests run against a file-backed SQLite database by default.
Tests marked ``integration`` use a Testcontainers PostgreSQL instance
instead (see ``postgres_engine``).
"""

from datetime import datetime, timezone
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

from raices_identity.infrastructure.persistence.sqlalchemy import Base, UserModel

# Same major version as production
POSTGRES_IMAGE = "postgres:16-alpine"

# Fixed UUID for testing - ensures deterministic behavior
TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
TEST_USER_EMAIL = "artesana@example.com"


def _create_test_user(user_id: UUID, email: str) -> UserModel:
    now = datetime.now(tz=timezone.utc)
    return UserModel(
        id=user_id,
        email=email,
        full_name="María López",
        password_hash="not-a-real-hash",
        is_seller=False,
        created_at=now,
        updated_at=now,
    )


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """Async engine on a fresh SQLite file with all tables created.

    A file (not ``:memory:``) lets several sessions see the same data,
    which the concurrency tests rely on.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'identity.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(async_engine):
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seeded_user_id(session_maker) -> UUID:
    """Persist one user so reset codes have an owner."""
    async with session_maker() as session:
        session.add(_create_test_user(TEST_USER_ID, TEST_USER_EMAIL))
        await session.commit()
    return TEST_USER_ID


@pytest_asyncio.fixture
async def db_session(session_maker, seeded_user_id):
    """Provide a session with one seeded user; uncommitted work is rolled back."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="session")
def postgres_container():
    """
    Start a PostgreSQL container for the test session.

    Only requested by tests marked ``integration``, so Docker is not needed
    for the default run.
    """
    with PostgresContainer(POSTGRES_IMAGE) as postgres:
        yield postgres


@pytest_asyncio.fixture
async def postgres_engine(postgres_container):
    """Async engine on the container with a clean schema for each test."""
    connection_url = postgres_container.get_connection_url()
    # Testcontainers may return postgresql+psycopg2:// or postgresql://
    async_url = connection_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://")
    async_url = async_url.replace("postgresql://", "postgresql+asyncpg://")

    engine = create_async_engine(async_url, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
