"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- conversations (create, list, get, status, participants, permissions, deal, presence)
- chat (messages, documents)
- lenders (lender matches, select lender)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka

from dealroom.config.logging_config import (
    NO_CORRELATION_ID,
    correlation_id_var,
    setup_logging,
)
from dealroom.config.settings import Config, get_config
from dealroom.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from dealroom.setup.ioc.container import create_container
from dealroom.presentation.api import (
    chat_router,
    conversations_router,
    lenders_router,
)

logger = logging.getLogger(__name__)

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH or None, Config.LOG_FORMAT)

# Domain exception → HTTP status
DOMAIN_ERROR_STATUS = {
    ValidationError: 422,
    ConflictError: 409,
    InvalidTransitionError: 409,
    NotFoundError: 404,
    AccessDeniedError: 403,
    UpstreamError: 502,
}


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", NO_CORRELATION_ID)

        # Set in contextvars (propagates to async tasks and logging)
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)

        response.headers["X-Correlation-ID"] = correlation_id
        return response


def create_fastapi_app(
    config: Optional[type[Config]] = None,
    container: Optional[AsyncContainer] = None,
) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Each app gets its own DI container, so repository, locks and pending
    assistant replies are never shared between app instances.
    """
    config = config or get_config()
    container = container or create_container(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        - Startup: container already created and wired
        - Shutdown: close the container (cancels pending assistant replies,
          closes the Redis client)
        """
        logger.info("[App] Deal room API started")
        yield
        await container.close()
        logger.info("[App] Deal room API shutdown, DI container closed")

    app = FastAPI(
        title="Deal Room API",
        description="Deal conversations, EVA assistant and lender matching",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container, app)

    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Validation error handler - shows detailed Pydantic errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Inputs are not echoed; a NaN input cannot be rendered as JSON
        errors = jsonable_encoder(
            [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
        )
        logger.info(f"[App] Request validation failed: {errors}")
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": errors},
        )

    async def domain_exception_handler(request: Request, exc: Exception):
        status_code = next(
            code for error_type, code in DOMAIN_ERROR_STATUS.items()
            if isinstance(exc, error_type)
        )
        logger.info(f"[App] {type(exc).__name__} -> {status_code}: {exc}")
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    for error_type in DOMAIN_ERROR_STATUS:
        app.add_exception_handler(error_type, domain_exception_handler)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info(f"[App] HTTP {exc.status_code}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[App] Unhandled {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    # Health check routes
    @app.get("/", tags=["health"])
    async def root():
        return {"message": "Deal room API is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(conversations_router)
    app.include_router(chat_router)
    app.include_router(lenders_router)

    return app
