from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from querygate.db.pool import ConnectionPool, create_pool_engine
from querygate.gateway import CommandGateway

from ._stubs import StubPool


@pytest.fixture
def stub_pool() -> StubPool:
    return StubPool(rows=[{"id": 1, "name": "alice"}, {"id": 2, "name": "bob"}])


@pytest.fixture
def gateway(stub_pool: StubPool) -> CommandGateway:
    return CommandGateway(stub_pool)


@pytest_asyncio.fixture
async def sqlite_pool(tmp_path) -> AsyncIterator[ConnectionPool]:
    """
    A real SQLAlchemy async pool over a throwaway SQLite file.

    Small capacity and timeout so exhaustion is quick to provoke.
    """
    engine = create_pool_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}",
        pool_size=2,
        pool_timeout=0.5,
    )
    pool = ConnectionPool(engine)
    yield pool
    await pool.dispose()
