"""
Connection pool for the backing MySQL store.

The pool is constructed explicitly and handed to the stores; nothing in this
module keeps process-wide state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

logger = logging.getLogger(__name__)

PROBE_SQL = "SELECT 1"


class DatabasePool:
    """
    Bounded set of connections. Callers past ``pool_size`` wait for a free
    connection, for at most ``timeout`` seconds when one is given.
    """

    def __init__(
        self,
        database_url: str | URL,
        *,
        pool_size: int = 10,
        timeout: Optional[float] = None,
    ):
        if not database_url:
            raise ValueError("A database URL is required for DatabasePool")
        self.pool_size = pool_size
        self.timeout = timeout
        self.engine: Engine = create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=0,
            # QueuePool blocks indefinitely on a None timeout.
            pool_timeout=timeout,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False
        )

    def ping(self) -> None:
        """Run the liveness probe; raises on failure."""
        with self.engine.connect() as conn:
            conn.execute(text(PROBE_SQL))

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool closed.")


async def keep_alive(pool: DatabasePool, interval_seconds: float) -> None:
    """
    Probe the store every ``interval_seconds`` until cancelled.

    A failed probe is logged and the loop carries on; reconnecting is left to
    the pool.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(pool.ping)
            logger.info("Database connection is alive")
        except Exception:
            logger.exception("Error keeping the database connection alive")
