"""User aggregate for marketplace identity."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from raices_identity.domain.shared.time import utc_now
from raices_identity.domain.user.value_objects.email import Email


class User:
    """
    User aggregate root.

    Holds the identity of a marketplace account: normalized email, display
    name, bcrypt password hash and the seller flag. The hash never leaves
    the identity layer.
    """

    def __init__(
        self,
        email: Union[str, Email],
        full_name: str,
        password_hash: str,
        is_seller: bool = False,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._full_name = full_name
        self._password_hash = password_hash
        self._is_seller = is_seller
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def is_seller(self) -> bool:
        return self._is_seller

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @classmethod
    def create(
        cls,
        email: Union[str, Email],
        full_name: str,
        password_hash: str,
        is_seller: bool = False,
    ) -> "User":
        return cls(
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            is_seller=is_seller,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        email: Union[str, Email],
        full_name: str,
        password_hash: str,
        is_seller: bool,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            is_seller=is_seller,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
