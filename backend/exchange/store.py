"""
Directory Store: the filesystem state shared by the exchange components.

Owns the received-files, hosted-files and received-messages directories
under a single root and exposes the primitive operations the Message
Ledger, Upload Lander and Share Catalog are built on. All calls block;
async callers run them in a worker thread.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from config import (
    HOSTED_FILES_DIRNAME,
    RECEIVED_FILES_DIRNAME,
    RECEIVED_MESSAGES_DIRNAME,
)
from exchange.models import DirEntry

logger = logging.getLogger(__name__)


class DirectoryStore:
    """Filesystem primitives scoped to one drop spot root."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.received_files_dir = self.root / RECEIVED_FILES_DIRNAME
        self.hosted_files_dir = self.root / HOSTED_FILES_DIRNAME
        self.received_messages_dir = self.root / RECEIVED_MESSAGES_DIRNAME

    @property
    def directories(self) -> list[Path]:
        return [
            self.received_files_dir,
            self.hosted_files_dir,
            self.received_messages_dir,
        ]

    def ensure(self, directory: Path) -> Path:
        """Create ``directory`` and any missing parents. Idempotent."""
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def ensure_all(self) -> None:
        for directory in self.directories:
            self.ensure(directory)
        logger.info(f"Drop spot directories ready under {self.root}")

    def list_entries(self, directory: Path) -> Iterator[DirEntry]:
        """
        Yield the entries of ``directory`` in filesystem order.

        The iterator is lazy and can only be consumed once. The directory
        handle is released when it is exhausted or closed.
        """
        with os.scandir(directory) as it:
            for entry in it:
                yield DirEntry(name=entry.name, is_file=entry.is_file())

    def rename(self, src: Path, dst: Path, replace: bool = True) -> None:
        """
        Atomically move ``src`` to ``dst`` on the same filesystem.

        With ``replace=False`` an existing ``dst`` raises FileExistsError
        instead of being overwritten.
        """
        if not replace and os.path.lexists(dst):
            raise FileExistsError(
                f"Refusing to overwrite {dst} with {src}"
            )
        os.replace(src, dst)

    def write(self, path: Path, data: bytes) -> None:
        """Create or truncate ``path`` and write ``data`` to it."""
        with open(path, "wb") as f:
            f.write(data)

    def read(self, path: Path) -> bytes:
        with open(path, "rb") as f:
            return f.read()
