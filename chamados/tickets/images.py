"""Storage of ticket attachment images on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

from .models import Ticket

logger = logging.getLogger(__name__)


class ImageStore:
    """Keep one image per ticket under ``directory`` named after the ticket id."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def filename_for(ticket_id: str, original_filename: str | None) -> str:
        """Build the stored file name: the ticket id plus the upload's extension."""

        suffix = PurePath(original_filename or "").suffix
        return f"{ticket_id}{suffix}"

    def save(self, filename: str, content: bytes) -> Path:
        self.ensure_directory()
        path = self.directory / filename
        path.write_bytes(content)
        logger.debug("Stored image %s (%d bytes)", path, len(content))
        return path

    def find(self, ticket_id: str) -> str | None:
        """Return the first file whose name starts with ``ticket_id``."""

        if not self.directory.is_dir():
            return None
        prefix = str(ticket_id)
        for name in sorted(entry.name for entry in self.directory.iterdir() if entry.is_file()):
            if name.startswith(prefix):
                return name
        return None

    def resolve(self, ticket: Ticket) -> str | None:
        """Return the image associated with ``ticket``.

        The reference stored on the ticket wins; records written without one
        fall back to a directory scan by id prefix.
        """

        if ticket.image_file and (self.directory / ticket.image_file).is_file():
            return ticket.image_file
        return self.find(ticket.id)

    def delete(self, ticket: Ticket) -> list[str]:
        """Remove every image associated with ``ticket``, ignoring missing files."""

        names: list[str] = []
        if ticket.image_file:
            names.append(ticket.image_file)
        if self.directory.is_dir():
            prefix = str(ticket.id)
            names.extend(
                entry.name
                for entry in self.directory.iterdir()
                if entry.is_file() and entry.name.startswith(prefix) and entry.name not in names
            )

        removed: list[str] = []
        for name in names:
            path = self.directory / name
            if path.is_file():
                path.unlink(missing_ok=True)
                removed.append(name)
        if removed:
            logger.info("Removed images %s for ticket %s", removed, ticket.id)
        return removed
