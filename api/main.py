"""
FastAPI main application for Trend Radar.

This module initializes the FastAPI app, configures middleware, error
handlers, and includes all API routers.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import __version__
from api.routers import etf, health, metrics, trends
from api.schemas.common import ErrorResponse
from trend_radar.cache import CacheGateway
from trend_radar.config import get_settings
from trend_radar.observability.logging import setup_logging
from trend_radar.service import make_etf_gateway, make_trends_gateway
from trend_radar.storage.redis import RedisCacheRepository

logger = logging.getLogger(__name__)


# Application state
class AppState:
    """Application state container."""

    def __init__(self):
        self.redis_cache: Optional[RedisCacheRepository] = None
        self.trends_gateway: Optional[CacheGateway] = None
        self.etf_gateway: Optional[CacheGateway] = None
        self.started_at: Optional[datetime] = None


app_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.

    Redis is optional: without it every request recomputes the snapshot.
    Pending cache writes are drained before the connection is closed.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    # Startup
    logger.info("🚀 Starting Trend Radar API...")
    app_state.started_at = datetime.utcnow()

    try:
        redis_cache = RedisCacheRepository(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            default_ttl=settings.cache_ttl_seconds,
            socket_timeout=settings.cache_timeout_seconds,
        )
        await redis_cache.connect()
        app_state.redis_cache = redis_cache
        logger.info("✅ Redis cache connected")

    except Exception as e:
        logger.warning(f"⚠️  Redis connection failed: {e}")
        logger.info("API will continue without caching")

    app_state.trends_gateway = make_trends_gateway(app_state.redis_cache, settings)
    app_state.etf_gateway = make_etf_gateway(app_state.redis_cache, settings)

    logger.info("✅ API startup complete")

    yield

    # Shutdown
    logger.info("🛑 Shutting down Trend Radar API...")

    for gateway in (app_state.trends_gateway, app_state.etf_gateway):
        if gateway is not None:
            await gateway.drain()

    if app_state.redis_cache:
        try:
            await app_state.redis_cache.close()
            logger.info("✅ Redis cache disconnected")
        except Exception as e:
            logger.error(f"Error closing Redis cache: {e}")

    app_state.redis_cache = None
    app_state.trends_gateway = None
    app_state.etf_gateway = None

    logger.info("✅ API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Trend Radar API",
    description="""
    ## Trending Meme Radar

    Aggregates trending topics from TikTok, Google Trends, Reddit, X/Twitter
    and 4chan into a single deduplicated, cross-source ranking.

    ### Features

    - **Cross-Source Ranking**: Weighted per-source scores with multi-source boosts
    - **Meme Categories**: Animal, AI, absurdist and crypto classification
    - **Know Your Meme Enrichment**: Status and origin for the top trends
    - **Cached Snapshots**: Served from Redis for the configured TTL
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Cache"],
)


# Exception handlers

def _error_response(
    status_code: int, error: str, detail: Optional[str], code: str
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        detail=detail,
        code=code,
        timestamp=datetime.utcnow().isoformat() + "Z",
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(
        exc.status_code, str(exc.detail), str(exc.detail), f"HTTP_{exc.status_code}"
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Query parameters that fail validation, e.g. refresh=maybe."""
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation Error", str(exc), "VALIDATION_ERROR"
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
        "INTERNAL_ERROR",
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root() -> Dict[str, Any]:
    """
    API root endpoint providing basic information.
    """
    return {
        "name": "Trend Radar API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "trends": "/trends",
            "etf_flows": "/etf-flows",
            "health": "/health",
            "metrics": "/metrics",
        },
    }


# Include routers
app.include_router(trends.router)
app.include_router(etf.router)
app.include_router(health.router)
app.include_router(metrics.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
