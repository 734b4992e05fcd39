"""One-time password reset code generation."""

import secrets


class ResetCodeGenerator:
    """Produces 6-digit numeric reset codes.

    Codes are drawn uniformly from ``[100000, 999999]`` using the
    operating system's CSPRNG.
    """

    LOWEST = 100_000
    HIGHEST = 999_999

    def generate(self) -> str:
        return str(self.LOWEST + secrets.randbelow(self.HIGHEST - self.LOWEST + 1))
