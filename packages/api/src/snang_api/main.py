# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from snang_db import DatabaseService
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings
from .routes import consent, documents, health, portal
from .schemas.error import ErrorResponse
from .services.consent import log_consent_gate_status

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def _error_response(status_code: int, error: str, request_id: str, code: str | None = None):
    body = ErrorResponse(error=error, code=code, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException into the ``{error, code}`` body.

    ``detail`` is either the message itself or a dict carrying ``error`` and
    ``code``.
    """
    detail = exc.detail
    if isinstance(detail, dict):
        error, code = str(detail.get("error", "")), detail.get("code")
    else:
        error, code = str(detail), None
    return _error_response(exc.status_code, error, _request_id(request), code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies/params (wrong JSON types) are client errors."""
    return _error_response(422, str(exc.errors()), _request_id(request))


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return a generic 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    return _error_response(500, GENERIC_ERROR_MESSAGE, request_id)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicitly constructed Settings."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup/shutdown lifecycle."""
        log_consent_gate_status(settings)
        if settings.DEMO_MODE:
            logger.warning("Demo mode: DEMO BUILD watermark is rendered on portal pages")
        db_service = DatabaseService(
            settings.DATABASE_URL,
            echo=settings.SQL_ECHO,
            pool_size=settings.DB_POOL_SIZE,
        )
        app.state.db_service = db_service
        yield
        await db_service.dispose()

    app = FastAPI(
        title="Snang Portal API",
        description="Buyer/agent portal API: PDPA consent and document status",
        version="0.1.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(consent.router, prefix="/api/consent", tags=["consent"])
    app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
    app.include_router(portal.router, tags=["portal"])

    return app


app = create_app()
