"""
FastAPI application entry point for the site registry.

Serves the REST API behind the map dashboard:
- Site listing, search, creation, updates and deletion
- Status changes and power-only edits
- Login, registration and token verification
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .domain.exceptions import (
    AuthorizationException,
    DomainException,
    InvalidTokenError,
    NotFoundError,
)
from .infrastructure.database.connection import DatabaseManager, init_db
from .infrastructure.database.connection import health_check as database_health_check

settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Send application logs to stdout at the configured level."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Create missing tables on startup, dispose the pool on shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    try:
        await init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise

    yield

    logger.info("Shutting down")
    await DatabaseManager.close()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Build the app: logging, CORS, request logging, error handlers and routes."""
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Site Registry API - infrastructure sites, status and power sources",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    register_exception_handlers(app)
    register_routes(app)

    return app


# Status per domain error class; subclasses not listed fall back to their parent
ERROR_STATUS = {
    DomainException: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationException: status.HTTP_403_FORBIDDEN,
}


def domain_error_response(exc: DomainException) -> JSONResponse:
    """Render a domain error as the shared {error, message, details} envelope."""
    status_code = next(
        ERROR_STATUS[cls] for cls in type(exc).__mro__ if cls in ERROR_STATUS
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors, request validation errors and crashes to JSON responses."""

    async def domain_exception_handler(request: Request, exc: DomainException):
        if isinstance(exc, (InvalidTokenError, AuthorizationException)):
            logger.warning(f"{request.method} {request.url.path} refused: {exc.message}")
        return domain_error_response(exc)

    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, domain_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = {}
        for error in exc.errors():
            field = '.'.join(str(part) for part in error['loc'] if part != 'body') or 'body'
            errors.setdefault(field, []).append(error['msg'])
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                'error': 'VALIDATION_ERROR',
                'message': 'Invalid request',
                'details': {'validation_errors': errors},
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        message = str(exc) if settings.debug else 'An internal error occurred'
        details = {'type': type(exc).__name__} if settings.debug else {}
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'error': 'INTERNAL_ERROR', 'message': message, 'details': details},
        )


def register_routes(app: FastAPI) -> None:
    """Service endpoints at the root, the API under settings.api_prefix."""

    @app.get("/health", tags=["Health"])
    async def health():
        """Report database connectivity."""
        db_ok = await database_health_check()

        return {
            'status': 'healthy' if db_ok else 'degraded',
            'services': {
                'database': 'up' if db_ok else 'down',
            },
            'version': settings.app_version,
            'environment': settings.environment,
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {
            'name': settings.app_name,
            'version': settings.app_version,
            'api_docs': '/docs' if settings.debug else None,
        }

    from .api.routes import api_router

    app.include_router(api_router, prefix=settings.api_prefix)


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "site_registry.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )
