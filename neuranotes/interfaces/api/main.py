"""
FastAPI Main Application - API entry point.

Run with: uvicorn neuranotes.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from neuranotes import __version__
from neuranotes.config import configure_logging, get_settings

from .deps import cleanup_services, init_services
from .middleware import ErrorHandlerMiddleware, RequestContextMiddleware
from .routes import health, search

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting NeuraNotes API...")
    logger.info("  Database: %s", settings.db_path)
    logger.info("  Embedding provider: %s", settings.embedding_provider)
    logger.info("  Vector index: %s", settings.vector_index_path)

    await init_services()
    logger.info("  Services initialized")

    yield

    logger.info("Shutting down NeuraNotes API...")
    await cleanup_services()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="NeuraNotes API",
        description="Hybrid lexical + vector passage search",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.api_debug,
    )

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(search.router, prefix="/api/hybrid-search", tags=["Search"])

    return app


# Create app instance
app = create_app()
