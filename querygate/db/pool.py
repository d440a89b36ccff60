from __future__ import annotations

import logging
from typing import Any, Protocol

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from ..config import DbConfig
from .session import DbSession

logger = logging.getLogger(__name__)


class StatementPool(Protocol):
    """
    What the gateway needs from a connection pool.

    Each call acquires one connection, runs one statement and releases the
    connection before returning or raising.
    """

    async def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        """Execute a SELECT returning multiple rows."""
        ...

    async def execute(self, sql: str) -> dict[str, Any]:
        """Execute a non-SELECT statement and return execution metadata."""
        ...

    @property
    def in_use(self) -> int:
        """Connections currently checked out."""
        ...


def create_pool_engine(
    url: str | URL,
    pool_size: int = 10,
    pool_timeout: float = 30.0,
) -> AsyncEngine:
    """
    Create a bounded async engine.

    At most `pool_size` connections exist; callers beyond that suspend until
    one is returned, or fail with sqlalchemy.exc.TimeoutError after
    `pool_timeout` seconds. Every statement is auto-committed.
    """
    return create_async_engine(
        url,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
        isolation_level="AUTOCOMMIT",
    )


class ConnectionPool:
    """
    StatementPool backed by a SQLAlchemy AsyncEngine.

    Usage:
        pool = ConnectionPool.from_config(DbConfig.from_env())
        try:
            rows = await pool.fetch_all("SELECT * FROM test_users")
        finally:
            await pool.dispose()
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @classmethod
    def from_config(cls, config: DbConfig) -> "ConnectionPool":
        engine = create_pool_engine(config.url, config.pool_size, config.pool_timeout)
        logger.info(
            "Created connection pool for %s (size=%d)",
            engine.url.render_as_string(hide_password=True),
            config.pool_size,
        )
        return cls(engine)

    def session(self) -> DbSession:
        return DbSession(self.engine)

    async def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        async with self.session() as session:
            return await session.fetch_all(sql)

    async def execute(self, sql: str) -> dict[str, Any]:
        async with self.session() as session:
            return await session.execute(sql)

    @property
    def in_use(self) -> int:
        checkedout = getattr(self.engine.sync_engine.pool, "checkedout", None)
        return checkedout() if callable(checkedout) else 0

    async def dispose(self) -> None:
        await self.engine.dispose()
