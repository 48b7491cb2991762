"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.config import Config
from api.dependencies import get_roster_service, limiter
from api.routers import roster_router
from core.executors import shutdown_executors
from core.health import get_comprehensive_health
from services.interfaces.i_roster_service import IRosterService

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the stored roster before serving, release executors on shutdown."""
    logger.info(f"🚀 Starting {Config.APP_TITLE}...")
    Config.validate()
    service = get_roster_service()
    logger.info(f"✅ Roster loaded | students={len(service.view())}")

    yield

    shutdown_executors()
    logger.info("👋 Shutting down...")


# Create FastAPI app with lifespan manager
app = FastAPI(
    title=Config.APP_TITLE,
    description=Config.APP_DESCRIPTION,
    version=Config.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[
        {
            "name": "roster",
            "description": "⭐ Enroll students by voice, award stars by k-NN identification, undo changes",
        },
    ],
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=Config.CORS_ALLOW_CREDENTIALS,
    allow_methods=Config.CORS_ALLOW_METHODS,
    allow_headers=Config.CORS_ALLOW_HEADERS,
)

# Include routers
app.include_router(roster_router.router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": Config.APP_TITLE,
        "version": Config.APP_VERSION,
        "status": "running",
        "limits": {
            "max_fingerprints": Config.MAX_FINGERPRINTS,
            "k_neighbors": Config.K_NEIGHBORS,
            "history_depth": Config.HISTORY_DEPTH,
            "record_duration_seconds": Config.RECORD_DURATION_SECONDS,
        },
    }


@app.get("/health", include_in_schema=False)
async def health_check(service: IRosterService = Depends(get_roster_service)):
    """Roster storage and session health."""
    return await get_comprehensive_health(
        roster_file=Config.ROSTER_FILE,
        roster_service=service,
    )


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
