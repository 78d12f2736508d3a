"""
Exchange Manager: the interface the routing layer talks to.

Wires the Message Ledger, Upload Lander and Share Catalog to one
Directory Store and runs their blocking filesystem work in worker
threads so request handling stays responsive.
"""

import asyncio
import logging
from pathlib import Path
from typing import BinaryIO, Protocol

from exchange.catalog import ShareCatalog
from exchange.errors import EmptyMessageError
from exchange.lander import UploadLander
from exchange.ledger import MessageLedger
from exchange.models import LandingOutcome, LandingStatus
from exchange.naming import display_name
from exchange.store import DirectoryStore

logger = logging.getLogger(__name__)


class IncomingFile(Protocol):
    """What the manager needs from an uploaded file (e.g. starlette's UploadFile)."""
    filename: str | None
    file: BinaryIO


class ExchangeManager:
    """Owns the exchange components for one drop spot root."""

    def __init__(self, root: str | Path) -> None:
        self.store = DirectoryStore(root)
        self.ledger = MessageLedger(self.store)
        self.lander = UploadLander(self.store)
        self.catalog = ShareCatalog(self.store)

    def start(self) -> None:
        """Create the drop spot directories if missing."""
        self.store.ensure_all()

    async def submit_message(self, text: str) -> int:
        """Record a text message and return how many messages are stored."""
        if not text:
            raise EmptyMessageError("text message is empty")
        return await asyncio.to_thread(self.ledger.submit, text)

    async def land_uploads(self, uploads: list[IncomingFile]) -> list[LandingOutcome]:
        """
        Stage and land every uploaded file, in submission order.

        Best effort: a part that cannot be staged or moved is reported as
        FAILED and the rest of the submission is still processed.
        """
        outcomes: list[LandingOutcome] = []
        for upload in uploads:
            name = upload.filename or ""
            try:
                part = await asyncio.to_thread(self.lander.stage, name, upload.file)
            except OSError as e:
                logger.error(f"Failed to stage upload {name!r}: {e}")
                outcomes.append(
                    LandingOutcome(
                        name=display_name(name),
                        status=LandingStatus.FAILED,
                        error_message=str(e),
                    )
                )
                continue
            outcomes.extend(await asyncio.to_thread(self.lander.land, [part]))
        return outcomes

    async def list_shared(self) -> list[str]:
        return await asyncio.to_thread(self.catalog.list_shared)

    async def resolve_download(self, name: str) -> Path:
        """Path of a shared file, or SharedFileNotFound."""
        return await asyncio.to_thread(self.catalog.resolve_for_download, name)
