"""PDF report listing every ticket."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from .models import Ticket

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(slots=True)
class _Line:
    text: str
    font: str
    size: float
    underline: bool = False

    @property
    def leading(self) -> float:
        return self.size * 1.3


class TicketReportGenerator:
    """Render tickets into a paginated PDF document.

    Each ticket is laid out as one block (title heading, id, client, status and the
    wrapped description). A block never straddles two pages: when it does not
    fit in the remaining space the page is closed and the block starts on the
    next one.
    """

    def __init__(
        self,
        title: str,
        *,
        filename: str = "relatorio_chamados.pdf",
        pagesize: tuple[float, float] = A4,
        margin: float = 20 * mm,
        compress: bool = False,
    ) -> None:
        self.title = title
        self.filename = filename
        self.pagesize = pagesize
        self.margin = margin
        self.compress = compress

    @property
    def _text_width(self) -> float:
        return self.pagesize[0] - 2 * self.margin

    def _wrap(self, text: str, font: str, size: float, *, underline: bool = False) -> list[_Line]:
        lines: list[_Line] = []
        for paragraph in (text or "").splitlines() or [""]:
            chunks = simpleSplit(paragraph, font, size, self._text_width) or [""]
            lines.extend(_Line(chunk, font, size, underline) for chunk in chunks)
        return lines

    def _ticket_block(self, ticket: Ticket) -> list[_Line]:
        block = self._wrap(f"Título: {ticket.title}", BOLD_FONT, 16, underline=True)
        block += self._wrap(f"ID: {ticket.id}", FONT, 12)
        block += self._wrap(f"Cliente: {ticket.client}", FONT, 12)
        block += self._wrap(f"Status: {ticket.status}", FONT, 12)
        block += self._wrap(f"Descrição: {ticket.description}", FONT, 12)
        return block

    def render(self, tickets: Sequence[Ticket]) -> bytes:
        buffer = io.BytesIO()
        canvas = Canvas(buffer, pagesize=self.pagesize, pageCompression=1 if self.compress else 0)
        canvas.setTitle(self.title)

        width, height = self.pagesize
        top = height - self.margin
        bottom = self.margin
        gap = 12.0

        y = top
        for line in self._wrap(self.title, BOLD_FONT, 25):
            y -= line.leading
            canvas.setFont(line.font, line.size)
            canvas.drawCentredString(width / 2, y, line.text)
        y -= gap

        for ticket in tickets:
            block = self._ticket_block(ticket)
            block_height = sum(line.leading for line in block)
            if y - block_height < bottom and y < top:
                canvas.showPage()
                y = top
            for line in block:
                if y - line.leading < bottom:
                    # Only reached by a block taller than a whole page.
                    canvas.showPage()
                    y = top
                y -= line.leading
                self._draw_line(canvas, line, y)
            y -= gap

        canvas.showPage()
        canvas.save()
        return buffer.getvalue()

    def _draw_line(self, canvas: Canvas, line: _Line, y: float) -> None:
        canvas.setFont(line.font, line.size)
        canvas.drawString(self.margin, y, line.text)
        if line.underline and line.text:
            text_width = stringWidth(line.text, line.font, line.size)
            canvas.setLineWidth(0.8)
            canvas.line(self.margin, y - 2, self.margin + text_width, y - 2)


def iter_chunks(data: bytes, chunk_size: int = 64 * 1024) -> Iterable[bytes]:
    """Split ``data`` into ``chunk_size`` slices for a streaming response."""

    if chunk_size <= 0:
        raise ValueError("chunk_size must be greater than zero")

    def _generate() -> Iterator[bytes]:
        for start in range(0, len(data), chunk_size):
            yield data[start : start + chunk_size]

    return _generate()
