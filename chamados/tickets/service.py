from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from .images import ImageStore
from .models import DEFAULT_STATUS, Ticket
from .repository import TicketStore

logger = logging.getLogger(__name__)


class TicketServiceError(RuntimeError):
    """Base error for ticket service issues."""


class TicketNotFoundError(TicketServiceError):
    """Raised when a ticket could not be located."""


class TicketValidationError(TicketServiceError):
    """Raised when required ticket fields are missing."""


@dataclass(slots=True)
class ImageUpload:
    """Attachment received together with a new ticket."""

    filename: str | None
    content: bytes


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_ticket_id(ticket_id: str) -> UUID:
    try:
        return UUID(str(ticket_id))
    except ValueError as exc:
        raise TicketNotFoundError("Chamado não encontrado") from exc


@dataclass(slots=True)
class TicketService:
    """Ticket lifecycle operations on top of a store and the image directory."""

    repository: TicketStore
    images: ImageStore
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def list_tickets(self) -> list[Ticket]:
        return await self.repository.list_tickets()

    async def get_ticket(self, ticket_id: str) -> Ticket:
        ticket = await self.repository.get_ticket(parse_ticket_id(ticket_id))
        if ticket is None:
            raise TicketNotFoundError("Chamado não encontrado")
        return ticket

    async def create_ticket(
        self,
        *,
        title: str | None,
        description: str | None,
        client: str | None,
        image: ImageUpload | None = None,
    ) -> Ticket:
        if not title or not description or not client:
            raise TicketValidationError("Título, descrição e cliente são obrigatórios.")

        ticket_id = str(uuid4())
        image_file = ImageStore.filename_for(ticket_id, image.filename) if image is not None else None
        ticket = await self.repository.create_ticket(
            Ticket(
                id=ticket_id,
                title=title,
                description=description,
                client=client,
                status=DEFAULT_STATUS,
                opened_at=self.clock(),
                image_file=image_file,
            )
        )
        # The record is committed before the file lands; a failed write leaves a dangling reference.
        if image is not None and image_file is not None:
            self.images.save(image_file, image.content)
        logger.info("Ticket %s created for client %s", ticket.id, ticket.client)
        return ticket

    async def update_ticket(
        self,
        ticket_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
        client: str | None = None,
    ) -> Ticket:
        fields = {
            name: value
            for name, value in (
                ("title", title),
                ("description", description),
                ("status", status),
                ("client", client),
            )
            if value is not None
        }
        updated = await self.repository.update_ticket(parse_ticket_id(ticket_id), fields, self.clock())
        if updated is None:
            raise TicketNotFoundError("Chamado não encontrado")
        logger.info("Ticket %s updated (%s)", updated.id, ", ".join(sorted(fields)) or "timestamp only")
        return updated

    async def delete_ticket(self, ticket_id: str) -> None:
        key = parse_ticket_id(ticket_id)
        ticket = await self.repository.get_ticket(key)
        if ticket is None:
            raise TicketNotFoundError("Chamado não encontrado")

        self.images.delete(ticket)
        if not await self.repository.delete_ticket(key):
            raise TicketNotFoundError("Chamado não encontrado")
        logger.info("Ticket %s deleted", ticket.id)

    def image_for(self, ticket: Ticket) -> str | None:
        return self.images.resolve(ticket)
