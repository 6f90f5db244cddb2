"""FastAPI application main file."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.errors import register_exception_handlers
from api.routes import router
from src.database.db import close_db, init_db
from src.utils.config import settings
from src.utils.logging import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Startup
    await init_db()
    logger.info("Music Library API ready on %s:%d", settings.api_host, settings.api_port)

    yield

    # Shutdown
    await close_db()
    logger.info("Music Library API stopped")


app = FastAPI(
    title="Music Library API",
    description="Song catalog with lyrics and metadata fetched from a Genius-compatible API",
    version="1.0.0",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Music Library API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
