from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from chamados.tickets import Ticket, TicketRepository

NOW = datetime(2025, 12, 1, 9, 30, tzinfo=timezone.utc)


class DummyAcquire:
    def __init__(self, connection):
        self._connection = connection

    async def __aenter__(self):
        return self._connection

    async def __aexit__(self, exc_type, exc, tb):
        return False


class DummyPool:
    def __init__(self, connection):
        self._connection = connection

    def acquire(self):
        return DummyAcquire(self._connection)


def _row(ticket_id, **overrides):
    row = {
        "id": ticket_id,
        "title": "Impressora",
        "description": "Papel preso",
        "client": "ACME",
        "status": "Open",
        "image_file": None,
        "opened_at": NOW,
        "updated_at": None,
    }
    row.update(overrides)
    return row


@pytest.mark.asyncio
async def test_ensure_schema_creates_table():
    connection = AsyncMock()
    repository = TicketRepository(DummyPool(connection))

    await repository.ensure_schema()

    statement = connection.execute.await_args.args[0]
    assert "CREATE TABLE IF NOT EXISTS chamados" in statement


@pytest.mark.asyncio
async def test_insert_returns_stored_ticket():
    ticket_id = uuid4()
    connection = AsyncMock()
    connection.fetchrow = AsyncMock(return_value=_row(ticket_id, image_file=f"{ticket_id}.png"))
    repository = TicketRepository(DummyPool(connection))

    stored = await repository.create_ticket(
        Ticket(
            id=str(ticket_id),
            title="Impressora",
            description="Papel preso",
            client="ACME",
            status="Open",
            opened_at=NOW,
            image_file=f"{ticket_id}.png",
        )
    )

    assert stored.id == str(ticket_id)
    assert stored.image_file == f"{ticket_id}.png"
    args = connection.fetchrow.await_args.args
    assert args[1] == ticket_id
    assert args[5:] == ("Open", f"{ticket_id}.png", NOW)


@pytest.mark.asyncio
async def test_insert_without_row_raises():
    connection = AsyncMock()
    connection.fetchrow = AsyncMock(return_value=None)
    repository = TicketRepository(DummyPool(connection))

    with pytest.raises(RuntimeError):
        await repository.create_ticket(
            Ticket(id=str(uuid4()), title="t", description="d", client="c", status="Open", opened_at=NOW)
        )


@pytest.mark.asyncio
async def test_list_maps_rows_in_order():
    first, second = uuid4(), uuid4()
    connection = AsyncMock()
    connection.fetch = AsyncMock(return_value=[_row(first), _row(second, status="Fechado")])
    repository = TicketRepository(DummyPool(connection))

    tickets = await repository.list_tickets()

    assert [ticket.id for ticket in tickets] == [str(first), str(second)]
    assert tickets[1].status == "Fechado"
    assert "ORDER BY opened_at" in connection.fetch.await_args.args[0]


@pytest.mark.asyncio
async def test_get_returns_none_for_missing_row():
    connection = AsyncMock()
    connection.fetchrow = AsyncMock(return_value=None)
    repository = TicketRepository(DummyPool(connection))

    assert await repository.get_ticket(uuid4()) is None


@pytest.mark.asyncio
async def test_update_binds_fields_in_column_order():
    ticket_id = uuid4()
    connection = AsyncMock()
    connection.fetchrow = AsyncMock(return_value=_row(ticket_id, status="Fechado", updated_at=NOW))
    repository = TicketRepository(DummyPool(connection))

    updated = await repository.update_ticket(ticket_id, {"status": "Fechado", "client": "Outro"}, NOW)

    assert updated is not None
    assert updated.updated_at == NOW
    args = connection.fetchrow.await_args.args
    assert args[1:] == (ticket_id, None, None, "Fechado", "Outro", NOW)


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields():
    repository = TicketRepository(DummyPool(AsyncMock()))

    with pytest.raises(ValueError):
        await repository.update_ticket(uuid4(), {"opened_at": "yesterday"}, NOW)


@pytest.mark.asyncio
@pytest.mark.parametrize(("status", "expected"), [("DELETE 1", True), ("DELETE 0", False)])
async def test_delete_reports_affected_rows(status, expected):
    connection = AsyncMock()
    connection.execute = AsyncMock(return_value=status)
    repository = TicketRepository(DummyPool(connection))

    assert await repository.delete_ticket(uuid4()) is expected
