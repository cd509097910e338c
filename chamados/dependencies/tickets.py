from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, Request

from chamados.tickets import TicketReportGenerator, TicketRepository, TicketService

logger = logging.getLogger(__name__)


async def connect_ticket_service(state: Any) -> TicketService | None:
    """Build the ticket service on ``app.state`` from its database, or return ``None`` while it is unreachable."""

    database = getattr(state, "database", None)
    if database is None:
        return None
    try:
        repository = TicketRepository(await database.get_pool())
        await repository.ensure_schema()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Ticket store unavailable: %s", exc)
        return None
    state.ticket_service = TicketService(repository, images=state.image_store)
    return state.ticket_service


async def get_ticket_service(request: Request) -> TicketService:
    service = getattr(request.app.state, "ticket_service", None)
    if service is None:
        service = await connect_ticket_service(request.app.state)
    if service is None:
        raise HTTPException(status_code=503, detail="Serviço de chamados indisponível")
    return service


def get_report_generator(request: Request) -> TicketReportGenerator:
    return request.app.state.report_generator
