from __future__ import annotations

import asyncio
import json

import pytest
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from querygate.db.pool import ConnectionPool
from querygate.gateway import CommandGateway
from querygate.models import ExecutionRequest, Failure, FailureKind, Success


CREATE_USERS = "CREATE TABLE test_users (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"


@pytest.mark.asyncio
async def test_mutations_and_reads_round_trip(sqlite_pool: ConnectionPool) -> None:
    gateway = CommandGateway(sqlite_pool)

    created = await gateway.execute(ExecutionRequest("create_table", {"query": CREATE_USERS}))
    inserted = await gateway.execute(
        ExecutionRequest("insert_data", {"query": "INSERT INTO test_users (name) VALUES ('alice')"})
    )
    updated = await gateway.execute(
        ExecutionRequest("update_data", {"query": "UPDATE test_users SET name = 'bob' WHERE id = 1"})
    )
    rows = await gateway.execute(ExecutionRequest("run_sql_query", {"query": "SELECT id, name FROM test_users"}))

    assert isinstance(created, Success)
    assert created.payload["message"] == "Table created successfully"
    assert inserted.payload["result"]["affected_rows"] == 1
    assert inserted.payload["result"]["insert_id"] == 1
    assert updated.payload["result"]["affected_rows"] == 1
    assert rows == Success([{"id": 1, "name": "bob"}])

    deleted = await gateway.execute(ExecutionRequest("delete_data", {"query": "DELETE FROM test_users"}))
    assert deleted.payload["success"] is True
    assert deleted.payload["message"] == "Data deleted successfully"
    assert deleted.payload["result"]["affected_rows"] == 1
    assert sqlite_pool.in_use == 0


@pytest.mark.asyncio
async def test_database_rejection_becomes_error_envelope(sqlite_pool: ConnectionPool) -> None:
    gateway = CommandGateway(sqlite_pool)
    await gateway.execute(ExecutionRequest("create_table", {"query": CREATE_USERS}))

    envelope = await gateway.call("create_table", {"query": CREATE_USERS})

    assert envelope["isError"] is True
    text = envelope["content"][0]["text"]
    assert text.startswith("MySQL error: ")
    assert "already exists" in text
    assert sqlite_pool.in_use == 0


@pytest.mark.asyncio
async def test_malformed_select_is_operational(sqlite_pool: ConnectionPool) -> None:
    gateway = CommandGateway(sqlite_pool)

    result = await gateway.execute(ExecutionRequest("run_sql_query", {"query": "SELECT * FROM missing_table"}))

    assert isinstance(result, Failure)
    assert result.kind == FailureKind.DATABASE_ERROR
    assert "missing_table" in result.message
    assert sqlite_pool.in_use == 0


@pytest.mark.asyncio
async def test_percent_signs_are_not_interpolated(sqlite_pool: ConnectionPool) -> None:
    gateway = CommandGateway(sqlite_pool)
    await gateway.execute(ExecutionRequest("create_table", {"query": CREATE_USERS}))
    await gateway.execute(
        ExecutionRequest("insert_data", {"query": "INSERT INTO test_users (name) VALUES ('100%')"})
    )

    envelope = await gateway.call("run_sql_query", {"query": "SELECT name FROM test_users WHERE name LIKE '%\\%' ESCAPE '\\'"})

    assert json.loads(envelope["content"][0]["text"]) == [{"name": "100%"}]


@pytest.mark.asyncio
async def test_in_use_returns_to_baseline_under_concurrency(sqlite_pool: ConnectionPool) -> None:
    gateway = CommandGateway(sqlite_pool)
    await gateway.execute(ExecutionRequest("create_table", {"query": CREATE_USERS}))
    baseline = sqlite_pool.in_use

    results = await asyncio.gather(
        *(
            gateway.execute(ExecutionRequest("run_sql_query", {"query": "SELECT COUNT(*) AS n FROM test_users"}))
            for _ in range(8)
        ),
        gateway.execute(ExecutionRequest("run_sql_query", {"query": "SELECT * FROM nope"})),
    )

    assert all(r == Success([{"n": 0}]) for r in results[:8])
    assert isinstance(results[8], Failure)
    assert sqlite_pool.in_use == baseline == 0


@pytest.mark.asyncio
async def test_exhausted_pool_is_a_fault(sqlite_pool: ConnectionPool) -> None:
    gateway = CommandGateway(sqlite_pool)

    async with sqlite_pool.session(), sqlite_pool.session():
        assert sqlite_pool.in_use == 2
        with pytest.raises(PoolTimeoutError):
            await gateway.execute(ExecutionRequest("run_sql_query", {"query": "SELECT 1"}))

    assert sqlite_pool.in_use == 0


@pytest.mark.asyncio
async def test_statement_without_result_set_returns_no_rows(sqlite_pool: ConnectionPool) -> None:
    # SQLite has no row-less SELECT; any statement without a cursor
    # description takes the same path as MySQL's SELECT ... INTO @var.
    rows = await sqlite_pool.fetch_all("CREATE TABLE t (id INTEGER)")

    assert rows == []
    assert await sqlite_pool.fetch_all("SELECT COUNT(*) AS n FROM t") == [{"n": 0}]
    assert sqlite_pool.in_use == 0
