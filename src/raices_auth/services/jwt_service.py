"""JWT session token service.

Issues and verifies the signed, expiring session tokens carried by the
``access_token`` cookie or the ``Authorization: Bearer`` header.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from raices_auth.exceptions import InvalidTokenError
from raices_auth.schemas import SessionClaims


class JWTService:
    """Service for session token creation and verification.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_access_token(user_id, "user@example.com", False)
    >>> claims = service.verify_token(token)
    >>> print(claims.subject_id)
    """

    DEFAULT_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        expire_days: int = DEFAULT_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        expire_days
            Days until a session token expires (default 7)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expire = timedelta(days=expire_days)

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        is_seller: bool,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed session token.

        Parameters
        ----------
        user_id
            The user's unique identifier (``sub`` claim)
        email
            The user's email address
        is_seller
            The user's seller flag
        expires_delta
            Custom lifetime (optional, defaults to the configured lifetime)

        Returns
        -------
        The encoded JWT token string
        """
        now = datetime.now(tz=timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._expire)

        payload = {
            "sub": str(user_id),
            "email": email,
            "is_seller": is_seller,
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> SessionClaims:
        """Verify and decode a session token.

        Raises
        ------
        InvalidTokenError
            If the token is malformed, its signature does not match, or it
            has expired. There is no grace window.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )

            return SessionClaims(
                subject_id=UUID(payload["sub"]),
                email=payload["email"],
                is_seller=bool(payload.get("is_seller", False)),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e
