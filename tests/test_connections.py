from unittest.mock import AsyncMock, MagicMock

import pytest

from chamados.services.postgres import PostgresDatabase


@pytest.mark.asyncio
async def test_postgres_ping_reuses_pool(monkeypatch):
    connection_mock = AsyncMock()

    class DummyAcquire:
        async def __aenter__(self):
            return connection_mock

        async def __aexit__(self, exc_type, exc, tb):
            return False

    pool_mock = MagicMock()
    pool_mock.acquire.return_value = DummyAcquire()
    pool_mock.close = AsyncMock()
    created: list[dict] = []

    async def create_pool(**kwargs):
        created.append(kwargs)
        return pool_mock

    monkeypatch.setattr("chamados.services.postgres.asyncpg.create_pool", create_pool)

    database = PostgresDatabase("postgresql://test", max_size=3)
    assert await database.ping() is True
    assert await database.get_pool() is pool_mock
    connection_mock.execute.assert_awaited_with("SELECT 1")
    assert created == [{"dsn": "postgresql://test", "min_size": 1, "max_size": 3}]

    await database.close()
    pool_mock.close.assert_awaited()


@pytest.mark.asyncio
async def test_close_without_pool_is_noop():
    database = PostgresDatabase("postgresql://test")
    await database.close()
