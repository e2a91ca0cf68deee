# src/sheworks/main.py
"""Main entry point for the SheWorks marketplace API."""

from __future__ import annotations

import logging
import math

import httpx
import redis
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sheworks.api.v1 import (
    admin_router,
    auth_router,
    messages_router,
    notifications_router,
    orders_router,
    products_router,
    realtime_router,
)
from sheworks.core.logging import configure_logging
from sheworks.core.settings import settings
from sheworks.services.payments import PaymentClient
from sheworks.services.presence import InMemoryPresenceRegistry, RedisPresenceRegistry
from sheworks.services.rate_limit import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitExceeded,
    RedisRateLimitStore,
)
from sheworks.services.realtime import ConnectionManager, RealtimeChannel
from sheworks.services.translation import (
    InMemoryTranslationCache,
    RedisTranslationCache,
    build_translation_gateway,
)

configure_logging()

# Configure logger for this module
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="SheWorks API",
    description="Multilingual marketplace connecting customers with women-led vendors",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(products_router, prefix="/api/v1")
app.include_router(orders_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = max(1, math.ceil(exc.retry_after))
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "detail": "Too many translation requests, please try again later",
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def init_state(target: FastAPI) -> None:
    """Build the shared stores and clients the routers read from ``app.state``.

    With ``REDIS_URL`` set, presence, the translation cache and the rate
    limiter are shared through Redis; otherwise they live in this process.
    """
    target.state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.translation_http_timeout_seconds)
    )

    if settings.redis_url:
        redis_client = redis.Redis.from_url(settings.redis_url)
        target.state.redis = redis_client
        presence = RedisPresenceRegistry(redis_client)
        cache = RedisTranslationCache(redis_client, settings.translation_cache_ttl_seconds)
        rate_store = RedisRateLimitStore(redis_client)
        logger.info("Using Redis-backed realtime and translation stores")
    else:
        target.state.redis = None
        presence = InMemoryPresenceRegistry()
        cache = InMemoryTranslationCache(
            settings.translation_cache_ttl_seconds,
            settings.translation_cache_max_entries,
        )
        rate_store = InMemoryRateLimitStore()

    target.state.translation_gateway = build_translation_gateway(target.state.http_client, cache)
    target.state.translation_rate_limiter = RateLimiter(
        rate_store,
        settings.translation_rate_limit,
        settings.translation_rate_window_seconds,
    )
    target.state.realtime_channel = RealtimeChannel(presence, ConnectionManager())
    target.state.payment_client = PaymentClient(target.state.http_client)


@app.on_event("startup")
async def on_startup() -> None:
    init_state(app)
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    client: httpx.AsyncClient | None = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()
    redis_client = getattr(app.state, "redis", None)
    if redis_client is not None:
        redis_client.close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "SheWorks API",
        "version": settings.app_version,
        "description": "Multilingual marketplace connecting customers with women-led vendors",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sheworks.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
