"""FastAPI application factory.

Creates and configures the FastAPI application with all routers,
middleware, and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.

Run with uvicorn's factory mode:
    uvicorn raices.presentation.api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware

from raices.presentation.api.dependencies import create_tables, get_engine
from raices.presentation.api.exception_handlers import setup_exception_handlers
from raices.presentation.api.routers import auth_router
from raices_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# API version info
API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Accounts, sessions and password recovery.

**Sessions:**
- Register or log in with email and password, or sign in with Google
- The session token travels in an HttpOnly `access_token` cookie
  (or as a bearer token when the API runs in bearer mode)
- Tokens expire after 7 days; logout clears the cookie

**Password recovery:**
1. Request a 6-digit code by email (valid for 15 minutes)
2. Optionally verify the code
3. Reset the password with the code (each code works once)
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


def _configure_logging(settings: Settings) -> None:
    """Configure application logging.

    - Console output with timestamps and module names
    - Configurable log level for raices modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    for name in ("raices", "raices_auth", "raices_identity"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting RaícesMX API v%s...", API_VERSION)
    engine = get_engine()
    try:
        await create_tables(engine)
    except (ConnectionRefusedError, SQLAlchemyError) as e:
        logger.critical("Could not initialize the database: %s", e)
        raise SystemExit(1) from None
    yield

    logger.info("Shutting down RaícesMX API...")
    await engine.dispose()
    logger.info("Database connections closed")


def create_v1_router() -> APIRouter:
    v1_router = APIRouter()
    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Authentication and account recovery for the RaícesMX marketplace.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Holds the OAuth state between the Google redirect and the callback
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.oauth_session_secret,
        same_site="lax",
        https_only=settings.cookie_secure,
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    # Health check endpoint (unversioned - always accessible)
    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "version": API_VERSION,
            "api_versions": ["v1"],
        }

    return app
