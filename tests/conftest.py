from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from chamados.core.config import Settings
from chamados.dependencies.auth import get_clock
from chamados.dependencies.tickets import get_ticket_service
from chamados.main import create_app
from chamados.security import Identity
from chamados.tickets import Ticket, TicketService

MONDAY = datetime(2025, 12, 1, 10, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class InMemoryTicketStore:
    """Dictionary backed stand-in for the asyncpg repository."""

    def __init__(self) -> None:
        self.records: dict[UUID, Ticket] = {}

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        self.records[UUID(ticket.id)] = replace(ticket)
        return replace(ticket)

    async def list_tickets(self) -> list[Ticket]:
        return [replace(ticket) for ticket in self.records.values()]

    async def get_ticket(self, ticket_id: UUID) -> Ticket | None:
        ticket = self.records.get(ticket_id)
        return replace(ticket) if ticket is not None else None

    async def update_ticket(self, ticket_id: UUID, fields: dict[str, str], updated_at: datetime) -> Ticket | None:
        ticket = self.records.get(ticket_id)
        if ticket is None:
            return None
        for name, value in fields.items():
            setattr(ticket, name, value)
        ticket.updated_at = updated_at
        return replace(ticket)

    async def delete_ticket(self, ticket_id: UUID) -> bool:
        return self.records.pop(ticket_id, None) is not None


@pytest.fixture
def settings(tmp_path) -> Settings:
    assets = tmp_path / "assets"
    (assets / "images").mkdir(parents=True)
    return Settings(assets_dir=assets, secret_key="test-secret", business_timezone="UTC")


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(MONDAY)


@pytest.fixture
def store() -> InMemoryTicketStore:
    return InMemoryTicketStore()


@pytest.fixture
def app(settings, clock, store):
    application = create_app(settings)
    service = TicketService(store, images=application.state.image_store, clock=clock)

    async def override_service():
        return service

    application.dependency_overrides[get_ticket_service] = override_service
    application.dependency_overrides[get_clock] = lambda: clock
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def token(app) -> str:
    return app.state.token_service.issue(Identity(email="suporte@netcom.com", name="Suporte Netcom"))


@pytest.fixture
def auth_headers(token) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_ticket(client, auth_headers):
    """Create a ticket through the API and return its id."""

    def _create(title: str = "Impressora travada", **extra) -> str:
        payload = {"title": title, "description": "Papel preso na bandeja", "client": "Cliente Teste", **extra}
        response = client.post("/chamados", json=payload, headers=auth_headers)
        assert response.status_code == 201
        return response.headers["location"].rsplit("/", 1)[-1]

    return _create
