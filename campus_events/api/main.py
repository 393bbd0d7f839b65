"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from campus_events.adapters.repository.postgres import open_pool, run_migrations
from campus_events.api.errors import register_exception_handlers
from campus_events.api.routers import router as api_router
from campus_events.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "auth", "description": "Sign up, log in and manage the token's own account"},
    {"name": "events", "description": "Browse events, manage them as admin, register and cancel"},
    {"name": "users", "description": "Own profile and registrations; admin user management"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the shared connection pool for the life of the process.

    Startup blocks until the database answers (bounded retries with
    backoff) and the schema is migrated; requests reach the pool through
    ``app.state.pool``.
    """
    settings = get_settings()
    logger.info("campus-events starting (%s)", settings.environment)

    pool = open_pool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        attempts=settings.db_connect_attempts,
        backoff_seconds=settings.db_connect_backoff_seconds,
        timeout_seconds=settings.db_connect_timeout_seconds,
    )
    try:
        run_migrations(pool)
        app.state.pool = pool
        logger.info("campus-events ready")
        yield
    finally:
        pool.close()
        logger.info("Connection pool closed")


app = FastAPI(
    title="campus-events",
    description="Campus events API - Browse events, register within capacity, manage accounts",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")


@app.get("/api", tags=["system"])
def api_root() -> dict[str, str]:
    return {"message": "Welcome to the Campus Events API"}


@app.get("/health", tags=["system"])
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Database failures surface through the exception handlers.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
