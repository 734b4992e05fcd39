"""Value objects for the user domain."""

from raices_identity.domain.user.value_objects.email import Email, normalize_email

__all__ = [
    "Email",
    "normalize_email",
]
