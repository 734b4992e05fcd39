"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. RAICES_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_JWT_SECRET_LENGTH = 32


def _find_project_root() -> Path:
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent

    return Path.cwd()


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. RAICES_ENV_FILE env var
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("RAICES_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app fails without these)
    jwt_secret_key: SecretStr  # HS256 signing secret, at least 32 characters
    brevo_api_key: SecretStr  # Transactional email provider key
    brevo_from_email: str  # Sender address for transactional email

    # Application
    app_name: str = "RaícesMX"
    environment: Literal["development", "production"] = "development"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/raices.db"

    # API (API_ prefix)
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed (secure default)
    api_session_transport: Literal["cookie", "bearer"] = "cookie"
    api_cookie_secure: bool | None = None  # None = secure only in production

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Ensure cors_origins is stored as comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    # JWT
    jwt_expire_days: int = 7

    # Passwords and reset codes
    bcrypt_rounds: int = 10
    reset_code_expire_minutes: int = 15

    # Brevo (BREVO_ prefix)
    brevo_api_url: str = "https://api.brevo.com/v3/smtp/email"
    brevo_from_name: str = "RaícesMX"
    brevo_timeout_seconds: float = 10.0

    # Google OAuth (GOOGLE_ prefix); sign-in is disabled until both are set
    google_client_id: str = ""
    google_client_secret: SecretStr | None = None
    google_callback_url: str = "http://localhost:3000/api/v1/auth/google/callback"
    session_secret_key: SecretStr | None = None  # OAuth state; falls back to JWT secret

    # Frontend URL (for the post-OAuth redirect)
    frontend_url: str = "http://localhost:4200"

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("jwt_secret_key")
    @classmethod
    def _validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < MIN_JWT_SECRET_LENGTH:
            msg = f"jwt_secret_key must be at least {MIN_JWT_SECRET_LENGTH} characters"
            raise ValueError(msg)
        return v

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        """Whether the session cookie carries the Secure attribute."""
        if self.api_cookie_secure is not None:
            return self.api_cookie_secure
        return self.is_production

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def oauth_session_secret(self) -> str:
        secret = self.session_secret_key or self.jwt_secret_key
        return secret.get_secret_value()


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Required fields (jwt_secret_key, brevo_api_key, brevo_from_email) must be
    provided via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
