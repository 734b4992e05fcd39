"""Abstract repository interface for password reset codes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PasswordResetCodeData:
    """Immutable password reset code data."""

    id: UUID
    user_id: UUID
    code: str
    expires_at: datetime
    used: bool
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the code has expired.

        A code is still accepted at the exact instant of ``expires_at``.
        """
        return now > self.expires_at


class PasswordResetCodeRepository(ABC):
    """Abstract repository for one-time password reset codes.

    At most one unused code exists per user. Implementations never commit;
    the caller owns the transaction.
    """

    @abstractmethod
    async def invalidate_all_unused(self, user_id: UUID) -> int:
        """Mark every unused code of a user as used.

        Implementations serialize concurrent calls for the same user so
        that a following :meth:`insert` leaves exactly one unused code.

        Parameters
        ----------
        user_id
            The user's unique identifier

        Returns
        -------
        Number of codes invalidated
        """

    @abstractmethod
    async def insert(
        self,
        user_id: UUID,
        code: str,
        expires_at: datetime,
    ) -> PasswordResetCodeData:
        """Persist a new unused code.

        Parameters
        ----------
        user_id
            The user's unique identifier
        code
            The 6-digit code sent to the user
        expires_at
            When the code stops being accepted

        Returns
        -------
        The stored code
        """

    @abstractmethod
    async def find_valid(self, user_id: UUID, code: str) -> PasswordResetCodeData | None:
        """Find an unused code for a user.

        Expiry is not checked here so callers can tell an expired code apart
        from an unknown one.

        Returns
        -------
        Code data if found and not used, None otherwise
        """

    @abstractmethod
    async def mark_used(self, code_id: UUID) -> bool:
        """Atomically flip a code from unused to used.

        Parameters
        ----------
        code_id
            The code's unique identifier

        Returns
        -------
        True if this call consumed the code, False if it was already used
        or no longer exists
        """

    @abstractmethod
    async def delete_expired(self, before: datetime) -> int:
        """Remove codes that expired before the given time.

        Returns
        -------
        Number of codes deleted
        """
