from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

DEFAULT_STATUS = "Open"


@dataclass(slots=True)
class Ticket:
    """Support request ("chamado") record."""

    id: str
    title: str
    description: str
    client: str
    status: str
    opened_at: datetime
    updated_at: datetime | None = None
    image_file: str | None = None
