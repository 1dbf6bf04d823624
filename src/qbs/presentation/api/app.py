"""FastAPI application factory.

Creates and configures the FastAPI application with all routers,
middleware, and exception handlers.

Routes are mounted under ``API_PREFIX`` (empty by default, so the auth
endpoints live at ``/auth/...``). The health check always stays at
``/health``.

Run with ``qbs serve`` or ``uvicorn --factory qbs.presentation.api.app:create_app``.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from qbs.infrastructure.persistence.sqlalchemy import (
    Base,
    create_database_engine,
    create_session_maker,
)
from qbs.presentation.api.exception_handlers import setup_exception_handlers
from qbs.presentation.api.routers import auth_router, profile_router
from qbs_auth import (
    InMemoryRevocationStore,
    JWTService,
    PasswordHashingService,
    RedisRevocationStore,
    RevocationStore,
)
from qbs_config.settings import Settings, get_settings
from qbs_identity.infrastructure.email import (
    BackgroundEmailNotifier,
    EmailService,
    drain_background_tasks,
)
from qbs_identity.infrastructure.oauth import GoogleOAuthClient

# Registers the users table on Base.metadata
from qbs_identity.infrastructure.persistence.sqlalchemy import UserModel  # noqa: F401


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str) -> None:
    """Configure application logging.

    Sets up logging for the qbs packages with:
    - Console output with timestamps and module names
    - Configurable log level for qbs modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    for name in ("qbs", "qbs_auth", "qbs_identity", "qbs_config"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """User authentication and session management.

**Registration & Login:**
- Register with email/password (verification email sent)
- Login to obtain an access/refresh token pair
- Refresh the access token, logout revokes it

**Google sign-in:**
- `/auth/google` redirects to Google
- The callback creates, links or reuses an account

**Security:**
- Passwords hashed with bcrypt
- Revoked tokens are rejected until they expire
""",
    },
    {
        "name": "Profile",
        "description": "The signed-in user's own profile and security status.",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting %s API v%s...", app.state.settings.app_name, API_VERSION)
    await _init_database_schema(app.state.engine)
    yield

    logger.info("Shutting down API...")
    await drain_background_tasks()
    await app.state.jwt_service.revocation_store.close()
    await app.state.engine.dispose()
    logger.info("Database connections closed")


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Initialize database schema (if not existent) and verify connectivity."""
    logger.info("Initializing database schema...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None

    logger.info("Database schema initialized successfully")


def _create_revocation_store(settings: Settings) -> RevocationStore:
    if settings.revocation_backend == "redis":
        logger.info("Using Redis revocation store")
        return RedisRevocationStore.from_url(settings.redis_url)
    logger.info("Using in-memory revocation store (lost on restart)")
    return InMemoryRevocationStore()


def _create_google_client(settings: Settings) -> GoogleOAuthClient | None:
    if not settings.google_oauth_enabled:
        logger.info("Google sign-in disabled (no client credentials)")
        return None
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret.get_secret_value(),
        redirect_uri=settings.google_redirect_uri,
        timeout=settings.google_timeout_seconds,
    )


def create_api_router() -> APIRouter:
    """Create the API router with all endpoints.

    Returns
    -------
    APIRouter with the auth and profile endpoints mounted.
    """
    api_router = APIRouter()
    api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    api_router.include_router(profile_router, prefix="/profile", tags=["Profile"])
    return api_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing. Without it, settings are
        loaded from the environment; a missing JWT_SECRET_KEY fails here.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Authentication and account linking for QB Securiegnty.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    engine = create_database_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.jwt_service = JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
        email_verification_expire_hours=settings.email_verification_expire_hours,
        password_reset_expire_minutes=settings.password_reset_expire_minutes,
        revocation_store=_create_revocation_store(settings),
    )
    app.state.password_service = PasswordHashingService(rounds=settings.bcrypt_rounds)
    app.state.notifier = BackgroundEmailNotifier(EmailService(settings))
    app.state.google_client = _create_google_client(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register domain exception handlers for consistent error responses
    setup_exception_handlers(app, debug=settings.debug)

    app.include_router(create_api_router(), prefix=settings.api_prefix)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": API_VERSION,
        }

    return app
