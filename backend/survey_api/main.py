"""
TerrAqua Survey API

FastAPI application for survey projects, waypoints and GPS tracks.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from survey_api.config import settings
from survey_api.db.session import init_db, AsyncSessionLocal
from survey_api.api.errors import register_exception_handlers
from survey_api.api.v1.router import api_router
from survey_api.features.projects import AutoPauseMonitor


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting TerrAqua Survey API...")
    await init_db()
    logger.info("Database initialized")

    monitor = None
    if settings.auto_pause_enabled:
        monitor = AutoPauseMonitor(
            AsyncSessionLocal,
            interval_seconds=settings.auto_pause_interval_seconds,
            inactivity_threshold=settings.inactivity_threshold,
        )
        await monitor.start()
    app.state.auto_pause_monitor = monitor

    yield

    # Shutdown
    if monitor is not None:
        await monitor.stop()
    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="TerrAqua Survey API",
    description="Survey projects with play/pause timing, waypoints and GPS tracks",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Errors ===
register_exception_handlers(app)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
