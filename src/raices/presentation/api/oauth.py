"""Authlib OAuth registry for Google sign-in.

Google is registered only when both the client ID and secret are
configured. The OAuth state parameter is kept in the Starlette session
cookie between the redirect and the callback.
"""

import logging
from functools import lru_cache

from authlib.integrations.starlette_client import OAuth, StarletteOAuth2App
from fastapi import Depends

from raices.presentation.api.config import get_api_settings
from raices_config.settings import Settings
from raices_identity import OAuthFailureError

logger = logging.getLogger(__name__)

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"


def create_oauth_registry(settings: Settings) -> OAuth:
    oauth = OAuth()

    if settings.google_oauth_enabled:
        oauth.register(
            name="google",
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret.get_secret_value(),
            server_metadata_url=GOOGLE_DISCOVERY_URL,
            client_kwargs={"scope": "openid email profile"},
        )
        logger.info("Google OAuth provider registered")

    return oauth


@lru_cache(maxsize=1)
def get_oauth_registry() -> OAuth:
    return create_oauth_registry(get_api_settings())


def get_google_client(
    settings: Settings = Depends(get_api_settings),
) -> StarletteOAuth2App:
    """Return the Google OAuth client.

    Raises
    ------
    OAuthFailureError
        If Google sign-in is not configured
    """
    if not settings.google_oauth_enabled:
        msg = "Google sign-in is not configured"
        raise OAuthFailureError(msg)
    return get_oauth_registry().create_client("google")
