"""A database that fails at commit time surfaces as 503, and nothing is persisted."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from raices.presentation.api.dependencies import get_db_session


class _FailingCommitSession(AsyncSession):
    async def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))


@pytest.fixture
def failing_commits(app, database_url):
    """Return a switch between working sessions and sessions whose commit fails."""
    working = app.dependency_overrides[get_db_session]
    engine = create_async_engine(database_url, poolclass=NullPool)
    failing_session_maker = async_sessionmaker(
        engine,
        class_=_FailingCommitSession,
        expire_on_commit=False,
    )

    async def failing_get_db_session():
        async with failing_session_maker() as session:
            yield session

    def _switch(enabled: bool = True) -> None:
        app.dependency_overrides[get_db_session] = failing_get_db_session if enabled else working

    return _switch


def _assert_unavailable(response) -> None:
    assert response.status_code == 503
    assert response.json() == {
        "detail": "Service temporarily unavailable",
        "code": "DEPENDENCY_UNAVAILABLE",
    }


class TestCommitFailure:
    def test_register(self, test_client, failing_commits, registered_user_data, api_v1_prefix):
        failing_commits()

        response = test_client.post(f"{api_v1_prefix}/auth/register", json=registered_user_data)

        _assert_unavailable(response)
        assert "access_token=" not in response.headers.get("set-cookie", "")

        failing_commits(False)
        login = test_client.post(
            f"{api_v1_prefix}/auth/login",
            json={"email": "artesana@example.com", "password": "abc123"},
        )
        assert login.status_code == 401

    def test_request_reset(self, test_client, registered_user, failing_commits, api_v1_prefix):
        failing_commits()

        response = test_client.post(
            f"{api_v1_prefix}/auth/password-reset/request",
            json={"email": "artesana@example.com"},
        )

        _assert_unavailable(response)

    def test_reset_password_keeps_old_password_and_code(
        self,
        test_client,
        registered_user,
        failing_commits,
        sent_codes,
        api_v1_prefix,
    ):
        test_client.post(
            f"{api_v1_prefix}/auth/password-reset/request",
            json={"email": "artesana@example.com"},
        )
        code = sent_codes()[-1]
        failing_commits()

        response = test_client.post(
            f"{api_v1_prefix}/auth/password-reset/reset",
            json={"email": "artesana@example.com", "code": code, "newPassword": "newpass1"},
        )

        _assert_unavailable(response)

        failing_commits(False)
        verify = test_client.post(
            f"{api_v1_prefix}/auth/password-reset/verify",
            json={"email": "artesana@example.com", "code": code},
        )
        login = test_client.post(
            f"{api_v1_prefix}/auth/login",
            json={"email": "artesana@example.com", "password": "abc123"},
        )
        assert verify.status_code == 200
        assert login.status_code == 200
