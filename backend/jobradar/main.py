"""
JobRadar API - Main Application Entry Point

This module initializes the FastAPI application with:
- Database connection and schema initialization
- Background discovery scheduler (batch sweeps and daily cleanup)
- Domain error to HTTP status mapping
- CORS middleware for frontend communication
- Prometheus metrics and API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (startup/shutdown)
    ├── CORS Middleware (settings.cors_origins)
    ├── Prometheus Middleware + /metrics
    └── API Router
        ├── /discovery - Seeding, company discovery, ingestion triggers
        ├── /companies - Company records
        ├── /jobs - Job creation and listing
        ├── /candidates - Resume parsing and candidate records
        ├── /match - Embedding-based matching and explanations
        └── /saved-jobs - Per-user bookmarks
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobradar.api import api_router
from jobradar.config import get_settings
from jobradar.database import init_db
from jobradar.dependencies import get_discovery_scheduler, get_page_renderer
from jobradar.exceptions import ConflictError, NotFoundError, UpstreamFailure, ValidationFailure
from jobradar.middleware import setup_metrics

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Initialize database tables
        2. Start the discovery scheduler (unless disabled in settings)

    Shutdown:
        1. Stop the scheduler
        2. Close the shared headless browser
    """
    await init_db()
    scheduler = get_discovery_scheduler()
    if settings.scheduler_enabled:
        scheduler.start()
    yield
    scheduler.stop()
    await get_page_renderer().close()


app = FastAPI(
    title="JobRadar API",
    description="Job discovery, ingestion and embedding-based matching API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_metrics(app)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(UpstreamFailure)
async def upstream_failure_handler(request: Request, exc: UpstreamFailure):
    logger.warning(f"Upstream failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
