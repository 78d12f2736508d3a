"""Share Catalog: what the hosted-files directory offers for download."""

import logging
from pathlib import Path

from exchange.errors import InvalidFileName, SharedFileNotFound
from exchange.naming import is_hidden, is_servable, join_inside
from exchange.store import DirectoryStore

logger = logging.getLogger(__name__)


class ShareCatalog:
    """
    Read-only view over hosted-files.

    Hidden files are neither listed nor served. Every listed name resolves
    back to the same file.
    """

    def __init__(self, store: DirectoryStore) -> None:
        self._store = store
        self._dir = store.hosted_files_dir

    def list_shared(self) -> list[str]:
        """Snapshot of visible regular files, in filesystem order."""
        names = [
            entry.name
            for entry in self._store.list_entries(self._dir)
            if entry.is_file and is_servable(entry.name)
        ]
        logger.info(f"Listing {len(names)} shared file(s) from {self._dir}")
        return names

    def resolve_for_download(self, requested_name: str) -> Path:
        """
        Map a requested name to a file inside hosted-files.

        Directory components are stripped before joining. Raises
        SharedFileNotFound when nothing downloadable matches.
        """
        try:
            path = join_inside(self._dir, requested_name)
        except InvalidFileName as e:
            raise SharedFileNotFound(str(e)) from e

        if is_hidden(path.name) or not path.is_file():
            raise SharedFileNotFound(f"no shared file named {path.name!r}")
        return path
