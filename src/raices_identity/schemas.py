"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from raices_auth import SessionClaims
from raices_identity.domain.user import User
from raices_identity.exceptions import OAuthFailureError


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful authentication command.

    Attributes
    ----------
    user
        The authenticated account
    access_token
        Signed session token to hand to the client
    claims
        The claims embedded in ``access_token``
    created
        True when the command created the account (register, first OAuth login)
    """

    user: User
    access_token: str
    claims: SessionClaims
    created: bool = False


@dataclass(frozen=True)
class OAuthIdentity:
    """Identity asserted by an external OAuth provider."""

    provider: str
    subject: str
    email: str
    full_name: str
    picture_url: str | None = None

    @classmethod
    def from_userinfo(
        cls,
        userinfo: Mapping[str, Any] | None,
        provider: str = "google",
    ) -> "OAuthIdentity":
        """Build an identity from an OpenID Connect userinfo mapping.

        Raises
        ------
        OAuthFailureError
            If the provider returned nothing, omitted the subject or email,
            or explicitly reported the email as unverified
        """
        if not userinfo:
            raise OAuthFailureError

        subject = userinfo.get("sub")
        email = userinfo.get("email")
        if not isinstance(subject, str) or not isinstance(email, str):
            raise OAuthFailureError
        if not subject or not email:
            raise OAuthFailureError

        if userinfo.get("email_verified") is False:
            msg = "Google account email is not verified"
            raise OAuthFailureError(msg)

        full_name = (
            userinfo.get("name")
            or " ".join(
                part
                for part in (userinfo.get("given_name"), userinfo.get("family_name"))
                if part
            )
            or email.split("@", 1)[0]
        )

        return cls(
            provider=provider,
            subject=subject,
            email=email,
            full_name=full_name,
            picture_url=userinfo.get("picture"),
        )
