"""
Kyoto CLI login service.

Entry point for the API server.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.middleware.rate_limit import rate_limiter
from backend.routes import cli_login as cli_login_routes
from backend.services.pairing_store import pairing_store

logger = logging.getLogger(__name__)

CLEANUP_INTERVAL_SECONDS = 60


async def cleanup_once() -> int:
    """Sweep expired pairing sessions and stale rate limit keys."""
    swept = pairing_store.sweep_expired()
    if swept > 0:
        logger.info("Swept %d expired CLI logins (%s)", swept, pairing_store.stats())

    rate_limiter.cleanup_old_entries(max_age_hours=2)
    return swept


# Background task for cleanup
async def cleanup_task():
    """
    Background task to sweep expired CLI logins and old rate limit entries.

    Runs every 60 seconds. Store operations also sweep lazily, so this only
    bounds memory when no requests arrive.
    """
    while True:
        try:
            await cleanup_once()
        except Exception:
            logger.exception("Error in cleanup task")

        await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Starts the background cleanup task and cancels it on shutdown.
    """
    cleanup_task_handle = asyncio.create_task(cleanup_task())
    logger.info("Background cleanup task started")

    yield

    cleanup_task_handle.cancel()
    try:
        await cleanup_task_handle
    except asyncio.CancelledError:
        logger.info("Background cleanup task stopped")


app = FastAPI(
    title="Kyoto",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(cli_login_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
