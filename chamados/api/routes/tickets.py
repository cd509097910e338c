from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.datastructures import UploadFile

from chamados.dependencies.auth import ACCESS_GATES
from chamados.dependencies.forms import read_body
from chamados.dependencies.tickets import get_ticket_service
from chamados.tickets import ImageUpload, Ticket, TicketService
from chamados.tickets.service import TicketNotFoundError, TicketValidationError

router = APIRouter(prefix="/chamados", tags=["chamados"], dependencies=ACCESS_GATES)


class TicketSubmission(BaseModel):
    title: str | None = None
    description: str | None = None
    client: str | None = None


class TicketUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None
    client: str | None = None


class TicketResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    client: str
    status: str
    opened_at: datetime = Field(alias="openedAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    image_path: str | None = Field(default=None, alias="imagePath")


class MessageResponse(BaseModel):
    message: str


TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]


async def read_submission(
    body: Annotated[Mapping[str, Any], Depends(read_body)],
) -> tuple[TicketSubmission, ImageUpload | None]:
    """Accept either a JSON body or a multipart/urlencoded form with an optional ``image`` file."""

    submission = TicketSubmission(**{key: _as_text(body.get(key)) for key in TicketSubmission.model_fields})
    image = body.get("image")
    if isinstance(image, UploadFile) and image.filename:
        return submission, ImageUpload(filename=image.filename, content=await image.read())
    return submission, None


async def read_update(body: Annotated[Mapping[str, Any], Depends(read_body)]) -> TicketUpdateRequest:
    """Validate a JSON or form update; values of the wrong type are a 400."""

    try:
        return TicketUpdateRequest.model_validate({key: body.get(key) for key in TicketUpdateRequest.model_fields})
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, UploadFile):
        return None
    return str(value)


def _to_response(request: Request, service: TicketService, ticket: Ticket) -> TicketResponse:
    image_name = service.image_for(ticket)
    image_url = str(request.url_for("assets", path=f"images/{image_name}")) if image_name else None
    return TicketResponse(
        id=ticket.id,
        title=ticket.title,
        description=ticket.description,
        client=ticket.client,
        status=ticket.status,
        opened_at=ticket.opened_at,
        updated_at=ticket.updated_at,
        image_path=image_url,
    )


@router.get("", response_model=list[TicketResponse])
async def list_tickets(request: Request, service: TicketServiceDep) -> list[TicketResponse]:
    tickets = await service.list_tickets()
    if not tickets:
        raise HTTPException(status_code=404, detail="Nenhum chamado encontrado")
    return [_to_response(request, service, ticket) for ticket in tickets]


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: str, request: Request, service: TicketServiceDep) -> TicketResponse:
    try:
        ticket = await service.get_ticket(ticket_id)
    except TicketNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _to_response(request, service, ticket)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    response: Response,
    service: TicketServiceDep,
    submitted: Annotated[tuple[TicketSubmission, ImageUpload | None], Depends(read_submission)],
) -> MessageResponse:
    payload, image = submitted
    try:
        ticket = await service.create_ticket(
            title=payload.title,
            description=payload.description,
            client=payload.client,
            image=image,
        )
    except TicketValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    response.headers["Location"] = f"{router.prefix}/{ticket.id}"
    return MessageResponse(message="Chamado criado com sucesso.")


@router.put("/{ticket_id}", response_model=MessageResponse)
async def update_ticket(
    ticket_id: str,
    payload: Annotated[TicketUpdateRequest, Depends(read_update)],
    service: TicketServiceDep,
) -> MessageResponse:
    try:
        await service.update_ticket(
            ticket_id,
            title=payload.title,
            description=payload.description,
            status=payload.status,
            client=payload.client,
        )
    except TicketNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MessageResponse(message="Chamado atualizado com sucesso")


@router.delete("/{ticket_id}", response_model=MessageResponse)
async def delete_ticket(ticket_id: str, service: TicketServiceDep) -> MessageResponse:
    try:
        await service.delete_ticket(ticket_id)
    except TicketNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return MessageResponse(message="Chamado excluído com sucesso.")
