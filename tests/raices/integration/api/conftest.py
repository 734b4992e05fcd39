"""Pytest fixtures for API integration tests.

The app runs against a file-backed SQLite database created per test, with
the email provider replaced by a mock that records every reset code sent.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from raices.presentation.api.app import API_V1_PREFIX, create_app
from raices.presentation.api.config import get_api_settings
from raices.presentation.api.dependencies import get_db_session, get_email_service
from raices_config.settings import Settings
from raices_identity.infrastructure.email import EmailService
from raices_identity.infrastructure.persistence.sqlalchemy import Base

TEST_JWT_SECRET = "test-jwt-secret-for-testing-only-32+"  # NOQA: S105


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"


@pytest.fixture
def settings_overrides() -> dict:
    """Per-module hook to tweak the API settings."""
    return {}


@pytest.fixture
def api_settings(database_url, settings_overrides) -> Settings:
    """Test API settings with cheap hashing and an insecure cookie."""
    values = {
        # Required security settings
        "jwt_secret_key": SecretStr(TEST_JWT_SECRET),
        "brevo_api_key": SecretStr("test-brevo-key"),
        "brevo_from_email": "no-reply@raices.test",
        # API settings
        "database_url": database_url,
        "api_debug": True,
        "api_cors_origins": "http://localhost:4200",
        "api_cookie_secure": False,  # Allow HTTP in tests
        "bcrypt_rounds": 4,
        "frontend_url": "http://localhost:4200",
        "google_client_id": "",  # Google sign-in disabled unless a test installs a client
        "api_session_transport": "cookie",
    }
    values.update(settings_overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def email_service() -> Mock:
    """Email service mock; reset codes are read from its call arguments."""
    service = Mock(spec=EmailService)
    service.send_password_reset_code = AsyncMock()
    return service


@pytest.fixture
def sent_codes(email_service):
    """Return a function listing the reset codes sent so far."""

    def _codes() -> list[str]:
        return [
            c.kwargs["code"] for c in email_service.send_password_reset_code.call_args_list
        ]

    return _codes


def _setup_test_database(engine) -> None:
    """Create the schema in a fresh event loop, outside TestClient's loop."""

    async def _setup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(_setup())
    finally:
        loop.close()


@pytest.fixture
def app(api_settings, database_url, email_service) -> FastAPI:
    """Create the application wired to the test database and email mock."""
    engine = create_async_engine(database_url, poolclass=NullPool)
    _setup_test_database(engine)

    app = create_app(settings=api_settings)

    test_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Override the database session dependency
    async def override_get_db_session():
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_api_settings] = lambda: api_settings
    app.dependency_overrides[get_email_service] = lambda: email_service

    return app


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def registered_user_data() -> dict:
    """Registration payload in the client's camelCase."""
    return {
        "email": "artesana@example.com",
        "fullName": "María López",
        "password": "abc123",
        "isSeller": False,
    }


@pytest.fixture
def registered_user(test_client, registered_user_data, api_v1_prefix) -> dict:
    """Register a user and return the response body.

    The test client keeps the session cookie afterwards.
    """
    response = test_client.post(
        f"{api_v1_prefix}/auth/register",
        json=registered_user_data,
    )
    assert response.status_code == 201, (
        f"Registration failed: {response.status_code} - {response.text}"
    )
    return response.json()
