"""FastAPI application factory."""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ucsindex import __version__
from ucsindex.core.config import ConfigManager
from ucsindex.core.engine import UCSIndexEngine, build_engine
from ucsindex.core.exceptions import (
    ConfigurationMissingError,
    DomainError,
    NotComputableError,
    QuoteStoreError,
    UCSIndexError,
)
from ucsindex.core.logging import get_logger, log_context
from ucsindex.web.models import ErrorResponse
from ucsindex.web.routes import asset_router, audit_router, calculation_router, health_router

logger = get_logger(__name__)


def _status_for(exc: UCSIndexError) -> int:
    if isinstance(exc, (NotComputableError, ConfigurationMissingError)):
        return 404
    if isinstance(exc, QuoteStoreError):
        return 503
    return 400


def create_app(engine: UCSIndexEngine | None = None) -> FastAPI:
    """Create the FastAPI application; ``engine`` is built from the user configuration when omitted."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owned = engine is None
        app.state.engine = engine or build_engine(ConfigManager().get_config(), configure_logs=True)
        app.state.start_time = time.time()
        yield
        if owned:
            app.state.engine.close()

    app = FastAPI(
        title="ucsindex - UCS environmental index engine",
        description="Computes the UCS index from commodity quotes and simulates edits through its dependency graph",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    _setup_middleware(app)
    _setup_routes(app)
    _setup_exception_handlers(app)
    return app


def _setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def trace_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        with log_context(trace_id=request_id, path=request.url.path):
            response = await call_next(request)
            logger.info("request served", method=request.method, status=response.status_code)
        response.headers["X-Request-ID"] = request_id
        return response


def _setup_routes(app: FastAPI) -> None:
    app.include_router(calculation_router, prefix="/api/v1", tags=["calculation"])
    app.include_router(asset_router, prefix="/api/v1", tags=["assets"])
    app.include_router(audit_router, prefix="/api/v1", tags=["audit"])
    app.include_router(health_router, prefix="/api/v1", tags=["health"])


def _error_response(request: Request, status_code: int, error: str, message: str, details: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            details=details,
            request_id=request.headers.get("X-Request-ID") or str(uuid.uuid4()),
        ).model_dump(mode="json"),
    )


def _setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(UCSIndexError)
    async def ucsindex_exception_handler(request: Request, exc: UCSIndexError) -> JSONResponse:
        status_code = _status_for(exc)
        details = {"error_code": exc.error_code}
        if isinstance(exc, DomainError):
            details.update(exc.to_payload())
        else:
            details["context"] = exc.details
        log = logger.error if status_code >= 500 else logger.info
        log("request failed", error_code=exc.error_code, status=status_code)
        return _error_response(request, status_code, exc.__class__.__name__, exc.message, details)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return _error_response(request, 400, "ValidationError", str(exc), {"error_code": "VALIDATION_ERROR"})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(
            request, exc.status_code, "HTTPException", str(exc.detail), {"status_code": exc.status_code}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error")
        return _error_response(request, 500, "InternalServerError", "Internal server error", {"type": type(exc).__name__})


__all__ = ["create_app"]
