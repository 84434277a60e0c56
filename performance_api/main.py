# performance_api/main.py

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from performance_api.api.middleware import AuditTriggerMiddleware, CorrelationIdMiddleware
from performance_api.api.routers import auth, health, logs, scores, tasks, users
from performance_api.application.exceptions import (
    ApplicationError,
    InvalidCredentialsError,
    ResourceNotFoundError,
)
from performance_api.config.logging import configure_logging
from performance_api.config.settings import get_settings
from performance_api.container import Container, build_container
from performance_api.domain.exceptions import DomainError
from performance_api.security.exceptions import (
    AccessResolutionError,
    AuthenticationError,
    AuthorizationError,
    RateLimitExceededError,
    SecurityError,
    TwoFactorRequiredError,
)


def _error(status_code: int, message: str, headers: Optional[dict] = None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
        headers=headers,
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request, exc: AuthenticationError):
        return _error(401, exc.message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request, exc: AuthorizationError):
        return _error(403, exc.message)

    @app.exception_handler(TwoFactorRequiredError)
    async def two_factor_required_handler(request, exc: TwoFactorRequiredError):
        return _error(400, exc.message, requires2FA=True)

    @app.exception_handler(RateLimitExceededError)
    async def rate_limit_handler(request, exc: RateLimitExceededError):
        return _error(429, exc.message, headers={"Retry-After": str(exc.retry_after_seconds)})

    @app.exception_handler(AccessResolutionError)
    async def access_resolution_handler(request, exc: AccessResolutionError):
        return _error(500, exc.message)

    @app.exception_handler(SecurityError)
    async def security_error_handler(request, exc: SecurityError):
        return _error(500, "Internal server error")

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials_handler(request, exc: InvalidCredentialsError):
        return _error(401, exc.message)

    @app.exception_handler(ResourceNotFoundError)
    async def not_found_handler(request, exc: ResourceNotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(ApplicationError)
    async def application_error_handler(request, exc: ApplicationError):
        return _error(400, exc.message)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request, exc: DomainError):
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request, exc: RequestValidationError):
        return _error(422, "Validation failed", errors=jsonable_encoder(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        message = "API endpoint not found" if exc.status_code == 404 else str(exc.detail)
        return _error(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request, exc: Exception):
        return _error(500, "Internal server error")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the ASGI app around a container (built from settings when not given)."""
    if container is None:
        container = build_container(get_settings())
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container

    # Last added runs first. Request flow: AuditTrigger -> CorrelationId -> CORS.
    # AuditTrigger stays outermost so its background write follows the final body chunk.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(AuditTriggerMiddleware)

    _register_exception_handlers(app)

    # Routers: /api/health, /api/auth, /api/users, /api/tasks, /api/scores, /api/logs
    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api/auth")
    app.include_router(users.router, prefix="/api/users")
    app.include_router(tasks.router, prefix="/api/tasks")
    app.include_router(scores.router, prefix="/api/scores")
    app.include_router(logs.router, prefix="/api/logs")
    return app


settings = get_settings()
configure_logging(settings.log_level)

app = create_app()
