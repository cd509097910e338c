"""Ticket domain models and services."""

from .images import ImageStore
from .models import DEFAULT_STATUS, Ticket
from .report import TicketReportGenerator
from .repository import TicketRepository, TicketStore
from .service import (
    ImageUpload,
    TicketNotFoundError,
    TicketService,
    TicketServiceError,
    TicketValidationError,
)

__all__ = [
    "DEFAULT_STATUS",
    "ImageStore",
    "ImageUpload",
    "Ticket",
    "TicketNotFoundError",
    "TicketReportGenerator",
    "TicketRepository",
    "TicketService",
    "TicketServiceError",
    "TicketStore",
    "TicketValidationError",
]
