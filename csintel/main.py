"""
CS Intelligence Platform - Main Application Entry Point

Cybersecurity funding intelligence: company and funding round tracking,
data source ingestion, dashboard analytics, AI company analysis and
classified data handling.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import ALL_ROUTERS
from .archivist import close_db, get_session, init_db, seed_database
from .common.cache import cache
from .common.envelope import error_response, utc_timestamp
from .config.settings import settings
from .config.sources import DATA_SOURCE_REGISTRY
from .scheduler import setup_scheduler, shutdown_scheduler

logger = logging.getLogger(__name__)

_started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting CS Intelligence Platform ({settings.environment})")
    logger.info(f"Tracking {len(DATA_SOURCE_REGISTRY)} data sources")

    try:
        await init_db()
    except SQLAlchemyError as e:
        logger.error(f"Could not initialize database: {e}")

    if settings.seed_on_startup:
        try:
            async with get_session() as session:
                counts = await seed_database(session)
            logger.info(f"Database seeded: {counts}")
        except SQLAlchemyError as e:
            logger.warning(f"Could not seed database: {e}")

    setup_scheduler()

    yield

    logger.info("Shutting down...")
    shutdown_scheduler()
    cache.clear()
    try:
        await close_db()
        logger.info("Database connections closed")
    except SQLAlchemyError as e:
        logger.warning(f"Error closing database: {e}")


app = FastAPI(
    title="CS Intelligence Platform",
    description="Cybersecurity funding intelligence and data source ingestion",
    version=settings.app_version,
    lifespan=lifespan,
)

# GZip compression for responses > 500 bytes
app.add_middleware(GZipMiddleware, minimum_size=500)

# CORS middleware for frontend
_allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
if settings.frontend_url:
    _allowed_origins.append(settings.frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for _router in ALL_ROUTERS:
    app.include_router(_router)


# ----- Error envelope -----

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content=error_response(f"{field}: {message}" if field else message),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=500, content=error_response("Internal server error"))


# ----- Endpoints -----

@app.get("/health")
async def health_check():
    """Liveness plus which optional integrations are configured."""
    return {
        "status": "healthy",
        "timestamp": utc_timestamp(),
        "version": settings.app_version,
        "environment": settings.environment,
        "uptimeSeconds": int(time.monotonic() - _started_at),
        "configuration": {
            "database": "sqlite" if settings.is_sqlite else "postgresql",
            "aiAnalysis": bool(settings.anthropic_api_key),
            "dataSources": len(DATA_SOURCE_REGISTRY),
            "syncSchedule": settings.sync_frequency,
            "slackNotifications": bool(settings.slack_webhook_url),
            "discordNotifications": bool(settings.discord_webhook_url),
            "cachedResponses": len(cache),
        },
        "serverTime": datetime.now(timezone.utc).isoformat(),
    }


# ----- CLI Runner -----

def run_server():
    """Run the FastAPI server."""
    import uvicorn
    uvicorn.run(
        "csintel.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    run_server()
