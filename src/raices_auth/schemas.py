"""Auth schemas and data structures."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SessionClaims:
    """Claims carried by a signed session token.

    Attributes
    ----------
    subject_id
        The unique identifier of the authenticated user
    email
        The user's email address at the time the token was issued
    is_seller
        Seller role flag at the time the token was issued
    issued_at
        When the token was minted (``iat``)
    expires_at
        When the token stops being accepted (``exp``)
    """

    subject_id: UUID
    email: str
    is_seller: bool
    issued_at: datetime
    expires_at: datetime
