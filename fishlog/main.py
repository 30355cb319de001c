"""
Main FastAPI application for the Fishing Log API.

Anglers keep a journal of outings enriched with environmental context
(moon phase, river flow, weather), follow USGS river gauges with flow
alerts, and track their fishing licenses.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from fishlog.config import settings
from fishlog.routers.admin import router as admin_router
from fishlog.routers.auth import router as auth_router
from fishlog.routers.conditions import router as conditions_router
from fishlog.routers.entries import router as entries_router
from fishlog.routers.gauges import router as gauges_router
from fishlog.routers.licenses import router as licenses_router
from fishlog.routers.rivers import router as rivers_router
from fishlog.utils.cache import cache
from fishlog.utils.logging_config import setup_logging, get_logger

# Import all models so SQLAlchemy relationships are configured
import fishlog.models  # noqa: F401

setup_logging()
logger = get_logger(__name__)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup and shutdown logging, and the Redis cache connection.

    Database tables are managed through Alembic migrations
    (`alembic upgrade head`).
    """
    logger.info("=" * 60)
    logger.info("Fishing Log API - Application starting up")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"API Version: {settings.API_V1_STR}")
    logger.info(f"Database: {settings.SQLALCHEMY_DATABASE_URI.split('://')[0]}")
    logger.info(f"Weather source: {'OpenWeatherMap' if settings.OPENWEATHER_API_KEY else 'simulated'}")
    logger.info("=" * 60)
    await cache.connect()

    yield

    await cache.close()
    logger.info("Fishing Log API - Application shutting down")


app = FastAPI(
    title="Fishing Log API",
    description="Fishing journal with moon phase, USGS river flow and weather context",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(status.HTTP_401_UNAUTHORIZED)
async def unauthorized_exception_handler(request: Request, exc: HTTPException):
    """Handle 401 Unauthorized exceptions."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "detail": exc.detail,
            "status_code": status.HTTP_401_UNAUTHORIZED
        },
        headers=getattr(exc, "headers", None) or {}
    )


if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/")
@limiter.limit(f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW}seconds")
async def root(request: Request):
    """API information."""
    return {
        "message": "Welcome to the Fishing Log API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Liveness check, with cache status."""
    return {"status": "healthy", "cache": await cache.status()}


app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(entries_router, prefix=settings.API_V1_STR)
app.include_router(rivers_router, prefix=settings.API_V1_STR)
app.include_router(conditions_router, prefix=settings.API_V1_STR)
app.include_router(gauges_router, prefix=settings.API_V1_STR)
app.include_router(licenses_router, prefix=settings.API_V1_STR)
app.include_router(admin_router, prefix=settings.API_V1_STR)
