"""
SmartNotesX Backend — FastAPI Application Factory
===================================================

What:  Builds and configures the FastAPI application.
How:   `create_app(settings)` wires the database handle, media store and
       services onto `app.state`, installs middleware, exception handlers
       and routers. uvicorn serves the module-level `app`.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware: RateLimit → RequestID → AccessLog → GZip   │
    │              → CORS                                     │
    │                                                         │
    │  Routers:  /api/auth  /api/notes  /api/jobs             │
    │            /api/bookmarks  /api/admin  /api/files       │
    │            /  /health                                   │
    │                                                         │
    │  app.state: settings, database, media_store, services   │
    │                                                         │
    │  Exception handlers: SmartNotesError → status table     │
    │                      validation → 400, other → 500      │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report configuration problems
    Shutdown: dispose the database engine, close the media store client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartnotes import __version__
from smartnotes.config import Settings, get_settings
from smartnotes.database import Database
from smartnotes.exceptions import (
    AuthError,
    AuthorizationError,
    BusinessRuleError,
    DuplicateError,
    InternalError,
    NotFoundError,
    RateLimitExceededError,
    SmartNotesError,
    UploadError,
    ValidationError,
)
from smartnotes.middleware.logging import RequestLoggingMiddleware
from smartnotes.middleware.rate_limit import RateLimitMiddleware
from smartnotes.middleware.request_id import RequestIDMiddleware, request_id_var
from smartnotes.routes import admin, auth, bookmarks, files, health, jobs, notes
from smartnotes.schemas.common import error_body
from smartnotes.services import ServiceContainer
from smartnotes.services.media_store import build_media_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Chatty third-party loggers are capped at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "urllib3", "cloudinary", "passlib"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("SmartNotesX Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health stays reachable and reports what is missing
        logger.error("Configuration error: %s", e)

    logger.info("Media backend: %s", settings.media_backend)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("SmartNotesX Backend shutting down...")
    await app.state.media_store.aclose()
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

ERROR_STATUS_CODES: Dict[Type[SmartNotesError], int] = {
    ValidationError: 400,
    DuplicateError: 400,
    BusinessRuleError: 400,
    AuthError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    RateLimitExceededError: 429,
    UploadError: 500,
    InternalError: 500,
}


def status_code_for(exc: SmartNotesError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


def _field_errors(errors) -> list:
    """Flatten pydantic error dicts into [{field, message}]."""
    result = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        result.append({"field": ".".join(loc) or "request", "message": err.get("msg", "Invalid value")})
    return result


def register_exception_handlers(app: FastAPI) -> None:
    """
    The single mapping from exceptions to HTTP responses.

        SmartNotesError subclasses   → ERROR_STATUS_CODES (envelope, message)
        RequestValidationError       → 400 with per-field errors
        HTTPException (404/405 ...)  → its own status, envelope
        anything else                → 500, generic message

    4xx are logged at WARNING, 5xx at ERROR. Responses never contain
    exception context, stack traces or SQL.
    """

    @app.exception_handler(SmartNotesError)
    async def handle_app_error(request: Request, exc: SmartNotesError):
        rid = request_id_var.get("")
        status = status_code_for(exc)
        if status >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = {}
        if isinstance(exc, AuthError):
            headers["WWW-Authenticate"] = "Bearer"
        if isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)

        errors = exc.errors if isinstance(exc, ValidationError) else None
        return JSONResponse(status_code=status, content=error_body(exc.message, errors), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc.errors())
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(status_code=400, content=error_body("Validation failed", errors))

    @app.exception_handler(PydanticValidationError)
    async def handle_model_validation(request: Request, exc: PydanticValidationError):
        errors = _field_errors(exc.errors())
        logger.warning("[%s] Model validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(status_code=400, content=error_body("Validation failed", errors))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            exc,
            exc_info=True,
        )
        return JSONResponse(status_code=500, content=error_body(InternalError().message))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application for the given settings (default: environment).

    Everything the request path needs is built here rather than in the
    lifespan, so an app driven directly through ASGI (tests) is complete.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="SmartNotesX API",
        description="Student note sharing and job board backend.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    media_store = build_media_store(settings)
    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.media_store = media_store
    app.state.services = ServiceContainer.build(settings, media_store)

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RateLimit → RequestID → AccessLog → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window,
        )

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(jobs.router)
    app.include_router(bookmarks.router)
    app.include_router(admin.router)
    app.include_router(files.router)

    return app


# uvicorn smartnotes.main:app
app = create_app()
