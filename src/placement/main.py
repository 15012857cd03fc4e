"""
Placement Portal API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database and Redis connections
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError

from placement.api import api_router
from placement.core import redis as redis_state
from placement.core.config import settings
from placement.core.database import async_session_maker, close_db, init_db
from placement.core.redis import close_redis, init_redis
from placement.modules.shared.errors import StoreUnavailableError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Redis is optional outside production; the rate limiter falls back to
    memory without it. The database is required in production.
    """
    logger.info(f"Starting {settings.app_name} in {settings.python_env} mode...")

    try:
        await init_redis()
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}")
        if settings.is_production:
            raise

    try:
        await init_db()
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        if settings.is_production:
            raise

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await close_redis()
    await close_db()
    logger.info("Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="Campus placement portal: applicants, organizations and administrators",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Database connection failures outside a router's own handling (e.g. during auth)."""
    logger.error(f"Store unavailable on {request.url.path}: {exc}")
    error = StoreUnavailableError()
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": {"error": error.error_code, "message": error.message}},
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> JSONResponse:
    """
    Readiness check: the store must answer before traffic is routed here.

    Redis is reported but not required; rate limiting falls back to memory.
    """
    checks = {"database": "ok", "redis": "ok" if redis_state.redis_client else "unavailable"}
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Readiness check failed: {e}")
        checks["database"] = "unavailable"
        return JSONResponse(status_code=503, content={"status": "not ready", **checks})

    return JSONResponse(content={"status": "ready", **checks})


if settings.is_development:

    @app.get("/debug/db", tags=["Debug"])
    async def debug_db():
        """Test database connection."""
        try:
            async with async_session_maker() as session:
                result = await session.execute(text("SELECT 1"))
                return {"database": "connected", "result": result.scalar()}
        except Exception as e:
            return {"database": "error", "message": str(e)}

    @app.get("/debug/redis", tags=["Debug"])
    async def debug_redis():
        """Test Redis connection."""
        try:
            if redis_state.redis_client:
                await redis_state.redis_client.ping()
                return {"redis": "connected"}
            return {"redis": "not initialized"}
        except Exception as e:
            return {"redis": "error", "message": str(e)}
