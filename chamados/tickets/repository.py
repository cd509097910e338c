from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

import asyncpg

from .models import Ticket


class TicketStore(Protocol):
    """Persistence operations the ticket service relies on."""

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        ...

    async def list_tickets(self) -> list[Ticket]:
        ...

    async def get_ticket(self, ticket_id: UUID) -> Ticket | None:
        ...

    async def update_ticket(self, ticket_id: UUID, fields: dict[str, str], updated_at: datetime) -> Ticket | None:
        ...

    async def delete_ticket(self, ticket_id: UUID) -> bool:
        ...


class TicketRepository:
    """asyncpg backed storage for the ``chamados`` table."""

    UPDATABLE_FIELDS = ("title", "description", "status", "client")

    _CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS chamados (
        id UUID PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        client TEXT NOT NULL,
        status TEXT NOT NULL,
        image_file TEXT NULL,
        opened_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ NULL
    )
    """

    _INSERT_SQL = """
    INSERT INTO chamados (id, title, description, client, status, image_file, opened_at)
    VALUES ($1, $2, $3, $4, $5, $6, $7)
    RETURNING id, title, description, client, status, image_file, opened_at, updated_at
    """

    _SELECT_SQL = """
    SELECT id, title, description, client, status, image_file, opened_at, updated_at
    FROM chamados
    WHERE id = $1
    """

    _LIST_SQL = """
    SELECT id, title, description, client, status, image_file, opened_at, updated_at
    FROM chamados
    ORDER BY opened_at ASC, id ASC
    """

    _UPDATE_SQL = """
    UPDATE chamados
    SET title = COALESCE($2, title),
        description = COALESCE($3, description),
        status = COALESCE($4, status),
        client = COALESCE($5, client),
        updated_at = $6
    WHERE id = $1
    RETURNING id, title, description, client, status, image_file, opened_at, updated_at
    """

    _DELETE_SQL = """
    DELETE FROM chamados WHERE id = $1
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def ensure_schema(self) -> None:
        async with self._pool.acquire() as connection:
            await connection.execute(self._CREATE_TABLE_SQL)

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        async with self._pool.acquire() as connection:
            row = await connection.fetchrow(
                self._INSERT_SQL,
                UUID(ticket.id),
                ticket.title,
                ticket.description,
                ticket.client,
                ticket.status,
                ticket.image_file,
                ticket.opened_at,
            )
        if row is None:
            raise RuntimeError("Failed to insert ticket")
        return self._row_to_ticket(row)

    async def list_tickets(self) -> list[Ticket]:
        async with self._pool.acquire() as connection:
            rows = await connection.fetch(self._LIST_SQL)
        return [self._row_to_ticket(row) for row in rows]

    async def get_ticket(self, ticket_id: UUID) -> Ticket | None:
        async with self._pool.acquire() as connection:
            row = await connection.fetchrow(self._SELECT_SQL, ticket_id)
        if row is None:
            return None
        return self._row_to_ticket(row)

    async def update_ticket(self, ticket_id: UUID, fields: dict[str, str], updated_at: datetime) -> Ticket | None:
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        async with self._pool.acquire() as connection:
            row = await connection.fetchrow(
                self._UPDATE_SQL,
                ticket_id,
                *(fields.get(name) for name in self.UPDATABLE_FIELDS),
                updated_at,
            )
        if row is None:
            return None
        return self._row_to_ticket(row)

    async def delete_ticket(self, ticket_id: UUID) -> bool:
        async with self._pool.acquire() as connection:
            result = await connection.execute(self._DELETE_SQL, ticket_id)
        if isinstance(result, str):
            return result.strip().endswith(" 1")
        return bool(result)

    @staticmethod
    def _row_to_ticket(row: Any) -> Ticket:
        return Ticket(
            id=str(row["id"]),
            title=str(row["title"]),
            description=str(row["description"]),
            client=str(row["client"]),
            status=str(row["status"]),
            opened_at=row["opened_at"],
            updated_at=row["updated_at"],
            image_file=row["image_file"],
        )
