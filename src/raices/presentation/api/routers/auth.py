"""Authentication router for registration, login, sessions and password reset."""

import logging
from typing import Annotated

from authlib.integrations.starlette_client import OAuthError, StarletteOAuth2App
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse

from raices.presentation.api.dependencies import (
    ACCESS_TOKEN_COOKIE,
    AuthService,
    CurrentUser,
    DBSession,
    ResetService,
    SettingsDep,
    commit_session,
)
from raices.presentation.api.oauth import get_google_client
from raices.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RequestResetRequest,
    ResetPasswordRequest,
    UserResponse,
    VerifyCodeRequest,
)
from raices_config.settings import Settings
from raices_identity import (
    AuthResult,
    IdentityError,
    OAuthFailureError,
    OAuthIdentity,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter()

GoogleClient = Annotated[StarletteOAuth2App, Depends(get_google_client)]

GOOGLE_SUCCESS_PATH = "/marketplace?login=google-success"


def _set_access_token_cookie(
    response: Response,
    token: str,
    settings: Settings,
) -> None:
    """Set the session token as an HttpOnly cookie.

    This cookie is:
    - HttpOnly: Not accessible to JavaScript (XSS protection)
    - Secure: Only sent over HTTPS (production by default)
    - SameSite=Lax: Not sent on cross-site subrequests
    - Alive exactly as long as the token it carries
    """
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.jwt_expire_days * 24 * 60 * 60,
        path="/",
    )


def _clear_access_token_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=ACCESS_TOKEN_COOKIE,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_seller=user.is_seller,
    )


def _create_auth_response(
    result: AuthResult,
    message: str,
    response: Response,
    settings: Settings,
) -> AuthResponse:
    if settings.api_session_transport == "bearer":
        access_token = result.access_token
    else:
        _set_access_token_cookie(response, result.access_token, settings)
        access_token = None

    return AuthResponse(
        message=message,
        user=_user_response(result.user),
        access_token=access_token,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Invalid email or password"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> AuthResponse:
    try:
        result = await auth_service.register(
            email=request.email,
            full_name=request.full_name,
            password=request.password,
            is_seller=request.is_seller,
        )
        await commit_session(session)
    except IdentityError:
        await session.rollback()
        raise

    return _create_auth_response(result, "User registered successfully", response, settings)


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Authenticate with email and password.

    The same 401 is returned for an unknown email and a wrong password.
    """
    result = await auth_service.login(email=request.email, password=request.password)
    return _create_auth_response(result, "Login successful", response, settings)


@router.get(
    "/google",
    summary="Start Google sign-in",
    responses={302: {"description": "Redirect to Google"}},
)
async def google_login(
    request: Request,
    google: GoogleClient,
    settings: SettingsDep,
):
    return await google.authorize_redirect(request, settings.google_callback_url)


@router.get(
    "/google/callback",
    summary="Complete Google sign-in",
    responses={
        302: {"description": "Signed in, redirect to the marketplace"},
        401: {"description": "Google did not return a usable identity"},
    },
)
async def google_callback(
    request: Request,
    google: GoogleClient,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> RedirectResponse:
    try:
        token = await google.authorize_access_token(request)
    except OAuthError as e:
        logger.warning("Google token exchange failed: %s", e.error)
        raise OAuthFailureError from e

    identity = OAuthIdentity.from_userinfo(token.get("userinfo"))

    try:
        result = await auth_service.oauth_login(identity)
        await commit_session(session)
    except IdentityError:
        await session.rollback()
        raise

    response = RedirectResponse(
        url=f"{settings.frontend_url.rstrip('/')}{GOOGLE_SUCCESS_PATH}",
        status_code=status.HTTP_302_FOUND,
    )
    # A redirect cannot carry a body, so the cookie is used in either transport
    _set_access_token_cookie(response, result.access_token, settings)
    return response


@router.get(
    "/profile",
    summary="Get the current session's account",
    responses={401: {"description": "Not authenticated"}},
)
async def profile(current_user: CurrentUser) -> ProfileResponse:
    return ProfileResponse(user=_user_response(current_user))


@router.post(
    "/logout",
    summary="Log out",
)
async def logout(
    response: Response,
    auth_service: AuthService,
    settings: SettingsDep,
) -> MessageResponse:
    """
    End the session by expiring the session cookie.

    Always succeeds, with or without a valid session.
    """
    message = auth_service.logout()
    _clear_access_token_cookie(response, settings)
    return MessageResponse(message=message)


@router.post(
    "/password-reset/request",
    summary="Request a password reset code",
    responses={
        200: {"description": "Same response whether or not the email is registered"},
        502: {"description": "The email could not be sent"},
    },
)
async def request_password_reset(
    request: RequestResetRequest,
    reset_service: ResetService,
    session: DBSession,
) -> MessageResponse:
    try:
        message = await reset_service.request_reset(request.email)
        await commit_session(session)
    except IdentityError:
        await session.rollback()
        raise

    return MessageResponse(message=message)


@router.post(
    "/password-reset/verify",
    summary="Check a password reset code",
    responses={400: {"description": "Invalid, used or expired code"}},
)
async def verify_password_reset_code(
    request: VerifyCodeRequest,
    reset_service: ResetService,
) -> MessageResponse:
    message = await reset_service.verify_code(request.email, request.code)
    return MessageResponse(message=message)


@router.post(
    "/password-reset/reset",
    summary="Set a new password with a reset code",
    responses={400: {"description": "Invalid, used or expired code"}},
)
async def reset_password(
    request: ResetPasswordRequest,
    reset_service: ResetService,
    session: DBSession,
) -> MessageResponse:
    try:
        message = await reset_service.reset_password(
            email=request.email,
            code=request.code,
            new_password=request.new_password,
        )
        await commit_session(session)
    except IdentityError:
        await session.rollback()
        raise

    return MessageResponse(message=message)
