from __future__ import annotations

from typing import Any

from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

# Send statements to the DB-API cursor without a parameter collection, so `%`
# stays literal on pyformat drivers.
_VERBATIM = {"no_parameters": True}


class DbSession:
    """
    Holds one pooled connection for the lifetime of a single statement.

    Use as:
        async with DbSession(engine) as session:
            rows = await session.fetch_all("SELECT ...")

    The connection goes back to the pool on every exit path. Statements are
    sent verbatim through ``exec_driver_sql``: no bind-parameter parsing and
    no ``%`` interpolation.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._conn: AsyncConnection | None = None

    async def __aenter__(self) -> "DbSession":
        if self._conn is not None:
            raise RuntimeError("DbSession is already active; nested sessions are not allowed")
        conn = self.engine.connect()
        await conn.start()
        self._conn = conn
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        try:
            if self._conn is not None:
                await self._conn.close()
        finally:
            self._conn = None

        # propagate exceptions (if any)
        return False

    def _connection(self) -> AsyncConnection:
        if self._conn is None:
            raise RuntimeError("DbSession is not active; use within an async context manager")
        return self._conn

    async def execute(self, sql: str) -> dict[str, Any]:
        """
        Execute a non-SELECT statement and return its execution metadata.

        Only the two fields every DB-API driver exposes are reported:
        ``affected_rows`` (cursor rowcount) and ``insert_id`` (cursor lastrowid,
        None when the driver has none). MySQL-specific header fields such as
        ``info`` or the warning count are not part of the metadata.
        """
        conn = self._connection()
        result: CursorResult = await conn.exec_driver_sql(sql, execution_options=_VERBATIM)
        try:
            return {
                "affected_rows": result.rowcount,
                "insert_id": result.lastrowid,
            }
        finally:
            result.close()

    async def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        """
        Execute a SELECT returning multiple rows.

        Statements that produce no result set (``SELECT ... INTO @var``,
        ``SELECT ... INTO OUTFILE``) return an empty list.
        """
        conn = self._connection()
        result: CursorResult = await conn.exec_driver_sql(sql, execution_options=_VERBATIM)
        try:
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]
        finally:
            result.close()
