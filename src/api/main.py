"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from psycopg_pool import ConnectionPool

from src.adapters.clock import SystemClock
from src.adapters.email import HttpEmailSender
from src.adapters.repository.postgres import run_migrations
from src.api.dependencies import build_email_sender
from src.api.errors import register_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Newsletter API v1 - Subscribe, confirm and publish",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool, email sender and clock on startup
    - Runs migrations on startup
    - Closes connection pool and email client on shutdown
    - Closes the pool if startup fails after it was created
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    try:
        # Run migrations
        logger.info("Running database migrations...")
        run_migrations(pool)

        email_sender = build_email_sender(settings)
        logger.info("Email backend: %s", settings.email_backend)
    except Exception:
        logger.error("Application startup failed, closing connection pool")
        pool.close()
        raise

    # Store collaborators in app state for dependency injection
    app.state.settings = settings
    app.state.pool = pool
    app.state.email_sender = email_sender
    app.state.clock = SystemClock()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if isinstance(email_sender, HttpEmailSender):
        email_sender.close()
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="letterbox",
    description="Newsletter subscription API - Double opt-in subscriptions and broadcast",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")
