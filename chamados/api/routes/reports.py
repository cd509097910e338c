from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from opentelemetry import trace
from starlette.concurrency import run_in_threadpool

from chamados.dependencies.auth import ACCESS_GATES
from chamados.dependencies.tickets import get_report_generator, get_ticket_service
from chamados.tickets import TicketReportGenerator, TicketService
from chamados.tickets.report import iter_chunks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/relatorio", tags=["relatorio"], dependencies=ACCESS_GATES)


@router.get("", response_class=StreamingResponse, summary="Download every ticket as a PDF")
async def download_report(
    request: Request,
    service: Annotated[TicketService, Depends(get_ticket_service)],
    generator: Annotated[TicketReportGenerator, Depends(get_report_generator)],
) -> StreamingResponse:
    # Falls back to the global provider, a no-op unless tracing is enabled.
    tracer = trace.get_tracer(__name__, tracer_provider=getattr(request.app.state, "tracer_provider", None))
    with tracer.start_as_current_span("relatorio.render") as span:
        tickets = await service.list_tickets()
        span.set_attribute("chamados.ticket_count", len(tickets))
        if not tickets:
            raise HTTPException(status_code=404, detail="Nenhum chamado encontrado")

        document = await run_in_threadpool(generator.render, tickets)
        span.set_attribute("chamados.report_bytes", len(document))
    logger.info("Report generated with %d tickets (%d bytes)", len(tickets), len(document))
    return StreamingResponse(
        iter_chunks(document),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{generator.filename}"'},
    )
