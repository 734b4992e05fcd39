"""Password hashing service using bcrypt.

Provides salted, adaptive password hashing and verification.
"""

import secrets
from functools import cached_property

import bcrypt

from raices_auth.exceptions import WeakPasswordError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt with a fixed work factor. Every call to :meth:`hash`
    draws a fresh salt, which is embedded in the returned hash string.

    Examples
    --------
    >>> service = PasswordHashingService(rounds=4)
    >>> hashed = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hashed)
    True
    >>> service.verify("wrong_password", hashed)
    False
    """

    MIN_LENGTH = 1
    # bcrypt only looks at the first 72 bytes of its input
    MAX_BYTES = 72

    def __init__(self, rounds: int = 10):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 10.
            Higher values are more expensive to brute force and slower
            to verify interactively.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If the password is empty or longer than bcrypt can represent
        """
        self.validate(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Never raises: a malformed hash or an unhashable password simply
        does not match.
        """
        if len(password.encode("utf-8")) > self.MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError, AttributeError):
            return False

    def validate(self, password: str) -> None:
        """Validate that a password can be hashed without truncation.

        Raises
        ------
        WeakPasswordError
            If the password is empty or exceeds 72 UTF-8 bytes
        """
        if not password or len(password) < self.MIN_LENGTH:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

    @cached_property
    def dummy_hash(self) -> str:
        """A valid hash of a throwaway secret.

        Verifying against it costs the same as a real verify, so callers can
        hide whether an account exists.
        """
        return self.hash(secrets.token_urlsafe(16))
