"""FastAPI application for the pricing service.

Run with:
    uvicorn priceservice.web.app:create_app --factory
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import BaseHTTPMiddleware

from priceservice import __version__
from priceservice.config import get_config
from priceservice.core.logging import configure_logging
from priceservice.db.connection import close_db, get_session, init_db
from priceservice.db.seed import seed_sample_data
from priceservice.models import ErrorResponse
from priceservice.service import PriceNotFoundError
from priceservice.web.dependencies import reset_price_service
from priceservice.web.routes import health, prices

logger = structlog.get_logger()


# Request Logging Middleware
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()

        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            logger.info(
                "request_completed",
                status_code=response.status_code,
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as exc:
            logger.error("request_failed", error=str(exc))
            raise


# Exception Handlers
async def price_not_found_handler(request: Request, exc: PriceNotFoundError):
    """Map missing articles/prices to a 404 problem body."""
    logger.warning("price_not_found", path=request.url.path, detail=exc.detail)
    body = ErrorResponse(
        type="Not_Found",
        title="Unavailable prices",
        status=404,
        detail=exc.detail,
    )
    return JSONResponse(status_code=404, content=body.model_dump())


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Report unexpected failures without leaking internals."""
    logger.exception("unexpected_error", path=request.url.path)
    body = ErrorResponse(
        type="Internal_Server_Error",
        title="Internal Server Error",
        status=500,
        detail="An unexpected error occurred. Please try again later.",
    )
    return JSONResponse(status_code=500, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PriceNotFoundError, price_not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_config()
    configure_logging(config.log_level, config.log_format)

    await init_db()
    if config.seed_sample_data:
        async with get_session() as session:
            await seed_sample_data(session)

    logger.info(
        "app_started",
        cache_enabled=config.cache.enabled,
        cache_backend=config.cache.backend,
        strategy=config.reconcile.strategy,
    )
    try:
        yield
    finally:
        reset_price_service()
        await close_db()
        logger.info("app_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    config = get_config()

    app = FastAPI(
        title="Pricing Service API",
        description="RESTful API for retrieving pricing information for retail products",
        version=__version__,
        contact={"name": "Development Team", "email": "dev@example.com"},
        license_info={
            "name": "Apache 2.0",
            "url": "http://www.apache.org/licenses/LICENSE-2.0.html",
        },
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Prometheus Metrics
    if config.enable_metrics:
        Instrumentator().instrument(app).expose(app)

    register_exception_handlers(app)

    app.include_router(prices.router)
    app.include_router(health.router)

    return app
