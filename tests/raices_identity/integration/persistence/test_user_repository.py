"""Integration tests for UserRepositorySQLAlchemy."""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest

from raices_identity.domain.shared.time import utc_now
from raices_identity.domain.user import Email, EmailAlreadyExistsError, User
from raices_identity.infrastructure.persistence.sqlalchemy import (
    PasswordResetCodeRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

TEST_EMAIL = "vendedor@example.com"


@pytest.fixture
def user_repo(db_session):
    """Create UserRepository instance with the test session."""
    return UserRepositorySQLAlchemy(db_session)


class TestUserRepositorySQLAlchemy:
    """Integration tests for UserRepositorySQLAlchemy."""

    @pytest.mark.asyncio
    async def test_add_and_find_by_id(self, user_repo):
        """Can add and retrieve a user by ID."""
        user = User.create(TEST_EMAIL, "Tienda Oaxaca", "hash", is_seller=True)

        await user_repo.add(user)
        found = await user_repo.find_by_id(user.id)

        assert found is not None
        assert isinstance(found.id, UUID)
        assert found == user
        assert found.email == TEST_EMAIL
        assert found.full_name == "Tienda Oaxaca"
        assert found.password_hash == "hash"
        assert found.is_seller is True
        assert found.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_find_by_id_not_found(self, user_repo):
        assert await user_repo.find_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_find_by_email_case_insensitive(self, user_repo):
        """find_by_email normalizes the address before looking it up."""
        await user_repo.add(User.create(TEST_EMAIL, "Tienda", "hash"))

        by_str = await user_repo.find_by_email("  VENDEDOR@Example.com ")
        by_vo = await user_repo.find_by_email(Email("Vendedor@example.com"))

        assert by_str is not None
        assert by_vo is not None
        assert by_str.id == by_vo.id

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, session_maker, seeded_user_id):
        """A second account for the same normalized email conflicts."""
        async with session_maker() as session:
            repo = UserRepositorySQLAlchemy(session)

            with pytest.raises(EmailAlreadyExistsError):
                await repo.add(User.create("ARTESANA@example.com", "Otra", "hash"))

    @pytest.mark.asyncio
    async def test_update_password_hash(self, user_repo, db_session):
        user = User.create(TEST_EMAIL, "Tienda", "old-hash")
        await user_repo.add(user)

        updated = await user_repo.update_password_hash(user.id, "new-hash")
        db_session.expire_all()
        found = await user_repo.find_by_id(user.id)

        assert updated is True
        assert found.password_hash == "new-hash"

    @pytest.mark.asyncio
    async def test_update_password_hash_unknown_user(self, user_repo):
        assert await user_repo.update_password_hash(uuid4(), "hash") is False

    @pytest.mark.asyncio
    async def test_delete_removes_user_and_reset_codes(self, user_repo, db_session, seeded_user_id):
        code_repo = PasswordResetCodeRepositorySQLAlchemy(db_session)
        await code_repo.insert(seeded_user_id, "123456", utc_now() + timedelta(minutes=15))

        await user_repo.delete(seeded_user_id)

        assert await user_repo.find_by_id(seeded_user_id) is None
        assert await code_repo.find_valid(seeded_user_id, "123456") is None
