"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventauth.core.config import Settings, get_settings
from eventauth.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from eventauth.domain.exceptions import (
    BadRequestError,
    EventAuthError,
    InternalError,
    UnauthorizedError,
)
from eventauth.infrastructure.auth import (
    AuthenticationMiddleware,
    AuthGatekeeper,
    JWTService,
    PasswordVerifier,
)
from eventauth.infrastructure.persistence.database import (
    DatabaseManager,
    close_database,
    init_database,
    set_db_manager,
)

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings: Settings = app.state.settings

    configure_logging(settings)
    logger.info(
        "Starting EventAuth",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database(app.state.db_manager)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down EventAuth")
    await close_database(app.state.db_manager)
    logger.info("Database connection closed")


def create_app(
    settings: Settings | None = None,
    *,
    jwt_service: JWTService | None = None,
    password_verifier: PasswordVerifier | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Defaults to the cached settings.
        jwt_service: Token service override (e.g. one with a controllable clock).
        password_verifier: Password verifier override (e.g. a cheaper hasher).

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Authentication service: login, registration and bearer tokens",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    if jwt_service is None:
        jwt_service = JWTService(
            secret_key=settings.token_secret,
            algorithm=settings.token_algorithm,
        )
    if password_verifier is None:
        password_verifier = PasswordVerifier(salt=settings.password_salt)

    db_manager = DatabaseManager(settings)
    set_db_manager(db_manager)

    app.state.settings = settings
    app.state.jwt_service = jwt_service
    app.state.password_verifier = password_verifier
    app.state.db_manager = db_manager

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    # Added last so it wraps everything, including 401s from the gatekeeper
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """
    settings: Settings = app.state.settings

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check. Does not touch the database."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check, including database connectivity."""
        db: DatabaseManager = app.state.db_manager
        if await db.check_connection():
            return {
                "status": "ready",
                "service": settings.app_name,
                "version": settings.app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "service": settings.app_name,
                "database": "disconnected",
            },
        )

    @app.get("/live", tags=["health"])
    async def liveness_check():
        """Liveness check."""
        return {
            "status": "alive",
            "service": settings.app_name,
            "version": settings.app_version,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from eventauth.infrastructure.api.routes import auth_router, users_router

    prefix = app.state.settings.api_prefix

    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(users_router, prefix=f"{prefix}/users", tags=["users"])


def _error_response(exc: EventAuthError, status_code: int) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"error": exc.message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
                "message": error["msg"],
                "code": error["type"],
            }
            for error in exc.errors()
        ]
        logger.info(
            "Request validation failed",
            path=request.url.path,
            fields=[detail["field"] for detail in details],
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "invalid request body", "details": details},
        )

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        return _error_response(exc, BadRequestError.status_code)

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return _error_response(exc, UnauthorizedError.status_code)

    @app.exception_handler(InternalError)
    async def internal_error_handler(request: Request, exc: InternalError):
        return _error_response(exc, InternalError.status_code)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.state.settings.debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    The authentication middleware is added first so the logging middleware
    wraps it and also records rejected requests.

    Args:
        app: FastAPI application instance.
    """
    settings: Settings = app.state.settings

    app.add_middleware(
        AuthenticationMiddleware,
        gatekeeper=AuthGatekeeper(app.state.jwt_service),
        public_paths=settings.resolved_public_paths,
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request and propagate a correlation ID."""
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
