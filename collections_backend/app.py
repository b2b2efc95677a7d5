"""
FastAPI application entry point for the collections backend.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from collections_backend.config import Settings, get_settings
from collections_backend.db import create_tables
from collections_backend.errors import register_exception_handlers
from collections_backend.pool import DatabasePool, keep_alive
from collections_backend.routes import router

logger = logging.getLogger(__name__)


def build_pool(settings: Settings) -> DatabasePool:
    return DatabasePool(
        settings.sqlalchemy_url(),
        pool_size=settings.db_pool_size,
        timeout=settings.db_pool_timeout,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    pool: DatabasePool = app.state.pool

    # No traffic is served until the store answers the probe.
    try:
        await asyncio.to_thread(pool.ping)
    except Exception:
        logger.exception("Error connecting to the database")
        raise
    logger.info("Connected to database")

    if settings.db_create_tables:
        await asyncio.to_thread(create_tables, pool)

    keepalive_task = asyncio.create_task(
        keep_alive(pool, settings.db_keepalive_interval)
    )
    try:
        yield
    finally:
        keepalive_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await keepalive_task
        pool.dispose()


def create_app(
    settings: Optional[Settings] = None, pool: Optional[DatabasePool] = None
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Collections Backend", version="0.1.0", lifespan=lifespan
    )
    app.state.settings = settings
    app.state.pool = pool or build_pool(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s request to %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)
    app.include_router(router, prefix=settings.api_prefix)
    return app
