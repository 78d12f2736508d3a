"""
Upload Lander: moves uploaded file parts into the received-files directory.

Parts are first staged as hidden temporary files inside received-files so
that landing is a same-filesystem rename. Each part is handled on its own:
a failure on one part is reported and the remaining parts are still landed.
"""

import logging
import shutil
import uuid
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from config import UPLOAD_CHUNK_SIZE, UPLOAD_TEMP_PREFIX
from exchange.errors import InvalidFileName
from exchange.models import LandingOutcome, LandingStatus, UploadPart
from exchange.naming import display_name, is_hidden, join_inside
from exchange.store import DirectoryStore

logger = logging.getLogger(__name__)


class UploadLander:
    """Lands staged upload parts, last write wins on name clashes."""

    def __init__(self, store: DirectoryStore) -> None:
        self._store = store
        self._dir = store.received_files_dir

    def stage(self, name: str, source: BinaryIO) -> UploadPart:
        """Copy a client stream into a temporary file next to its destination."""
        temp_path = self._dir / f"{UPLOAD_TEMP_PREFIX}{uuid.uuid4().hex}.part"
        try:
            with open(temp_path, "wb") as f:
                shutil.copyfileobj(source, f, UPLOAD_CHUNK_SIZE)
                size = f.tell()
        except OSError:
            self._discard(temp_path)
            raise
        return UploadPart(name=name or "", temp_path=temp_path, size=size)

    def land(self, parts: Iterable[UploadPart]) -> list[LandingOutcome]:
        """Land each part in order and return one outcome per part."""
        return [self._land_one(part) for part in parts]

    def _land_one(self, part: UploadPart) -> LandingOutcome:
        if part.size == 0:
            # An empty file input in the browser form still submits a part
            self._discard(part.temp_path)
            return LandingOutcome(
                name=display_name(part.name), status=LandingStatus.SKIPPED
            )

        try:
            destination = join_inside(self._dir, part.name)
            if is_hidden(destination.name):
                raise InvalidFileName(f"hidden file name: {part.name!r}")
        except InvalidFileName as e:
            logger.warning(f"Rejected upload: {e}")
            self._discard(part.temp_path)
            return LandingOutcome(
                name=display_name(part.name), status=LandingStatus.REJECTED
            )

        try:
            self._store.rename(part.temp_path, destination)
        except OSError as e:
            logger.error(f"Failed to land upload {destination.name}: {e}")
            self._discard(part.temp_path)
            return LandingOutcome(
                name=destination.name,
                status=LandingStatus.FAILED,
                error_message=str(e),
            )

        logger.info(f"New file was uploaded: {destination}")
        return LandingOutcome(name=destination.name, status=LandingStatus.LANDED)

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary upload {path}: {e}")
