"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from raices_identity.domain.user.aggregates.user import User
from raices_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates.

    Implementations never commit; the caller owns the transaction.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their email address (case-insensitive)."""

    @abstractmethod
    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises
        ------
        EmailAlreadyExistsError
            If the email is already taken, including by a concurrent insert
        """

    @abstractmethod
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        """Replace a user's password hash. Returns False if the user is gone."""

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete a user by ID."""
