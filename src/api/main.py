"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from src.adapters.pending.memory import InMemoryPendingRegistrationStore
from src.adapters.pending.sweeper import PendingRegistrationSweeper
from src.adapters.repository.postgres import run_migrations
from src.api.errors import install_exception_handlers
from src.api.routes import router
from src.config.settings import get_settings
from src.domain.registration import utc_now

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "signup", "description": "Email-verified signup: initiate, verify, resend, status"},
    {"name": "auth", "description": "Direct signup, login, logout and profile"},
    {"name": "payments", "description": "Stripe payment intents for logged-in users"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the pending registration store and starts its sweeper
    - Stops the sweeper and closes connection pool on shutdown
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

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    pending_store = InMemoryPendingRegistrationStore(
        ttl=timedelta(seconds=settings.verification_ttl_seconds)
    )
    sweeper = PendingRegistrationSweeper(
        pending_store,
        clock=utc_now,
        interval_seconds=settings.sweep_interval_seconds,
    )
    sweeper.start()

    # Store shared resources in app state for dependency injection
    app.state.pool = pool
    app.state.pending_store = pending_store

    if not settings.mailgun_configured:
        logger.warning("Mailgun not configured - verification emails are logged to the console")
    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY not set - payment intents will fail")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    sweeper.shutdown()
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="storefront-accounts",
    description="Account signup with email verification, login and Stripe checkout",
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

install_exception_handlers(app)
app.include_router(router)


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    # Validate database connectivity
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
