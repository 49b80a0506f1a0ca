"""
Course Content Access Service

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.config import get_settings
from src.core.errors import AppError, AuthRequiredError, ConfigurationError, StorageError
from src.database import init_db, close_db
from src.api.v1 import router as api_v1_router
from src.api.middleware.request_id import RequestIdMiddleware
from src.engines.files.registry import serving_registry
from src.plugins.serving import register_serving_plugins
from src.schemas.common import HealthResponse
from src.logging_config import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Startup: logging, serving plugins, database. Shutdown: database."""
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )
    logger.info("Starting %s v%s", settings.project_name, settings.version)

    # A malformed serving plugin aborts startup
    register_serving_plugins(serving_registry)
    logger.info(
        "Serving strategies registered",
        extra={"components": serving_registry.components()},
    )

    await init_db()
    logger.info("Database initialized")

    yield

    await close_db()
    logger.info("Database connections closed")


def _json_error(
    request: Request,
    status_code: int,
    content: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    response_headers = dict(headers or {})
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        response_headers["X-Request-ID"] = req_id
    return JSONResponse(status_code=status_code, content=content, headers=response_headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map the domain error hierarchy onto HTTP responses."""
    content = exc.to_response()
    headers: Dict[str, str] = {}

    if isinstance(exc, AuthRequiredError):
        headers["WWW-Authenticate"] = "Bearer"
        content["error"]["details"] = {"login_url": settings.login_url}
    elif isinstance(exc, ConfigurationError):
        logger.error("Configuration error: %s", exc.message, exc_info=exc)
    elif exc.http_status >= 500:
        logger.error("Request failed: %s", exc.message, exc_info=exc)
    else:
        logger.info("Request refused", extra={"code": exc.code, "path": request.url.path})

    return _json_error(request, exc.http_status, content, headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _json_error(request, exc.status_code, {"detail": exc.detail}, exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return _json_error(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"detail": "Validation error", "errors": errors},
    )


async def storage_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Database and file store failures surface as STORAGE_ERROR, never as a denial."""
    logger.error(
        "Storage failure: %s",
        type(exc).__name__,
        exc_info=exc,
        extra={"path": request.url.path},
    )
    error = StorageError("Storage unavailable")
    return _json_error(request, error.http_status, error.to_response())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    content: Dict[str, Any] = {
        "detail": str(exc) if settings.debug else "Internal server error",
        "request_id": getattr(request.state, "request_id", None),
    }
    if settings.debug:
        content["type"] = type(exc).__name__
    return _json_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="""
        Course Content Access Service

        Access decisions for course content of a learning management system.

        ## Features

        - **Search access**: per-document decisions for the course search areas
        - **File serving**: pluggable per-component serving strategies
        - **Scheduled tasks**: schedule edits recorded as audit events
        - **User filters**: users by role in courses of a category tree
        """,
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Last added is outermost; CORS wraps everything
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)
    app.add_exception_handler(OSError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Check application health."""
        return HealthResponse(
            status="ok",
            version=settings.version,
            database="connected",
            serving_strategies=len(serving_registry.components()),
        )

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": "/docs" if settings.debug else "disabled",
            "api": {"v1": settings.api_v1_prefix},
        }

    app.include_router(api_v1_router, prefix=settings.api_v1_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
