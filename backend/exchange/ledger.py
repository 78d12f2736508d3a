"""
Message Ledger: rotating-index history of received text messages.

Messages live in the received-messages directory as ``{index}.txt``.
The newest message is always ``0.txt``; each new message shifts every
existing index up by one. The directory listing is the only index.
"""

import logging
import re
import threading
from collections.abc import Iterable
from pathlib import Path

from config import MESSAGE_ENCODING
from exchange.store import DirectoryStore

logger = logging.getLogger(__name__)

# Canonical names only: "7.txt" is a message, "007.txt" and "a7.txt" are not
MESSAGE_NAME_RE = re.compile(r"^(0|[1-9][0-9]*)\.txt$")


def message_filename(index: int) -> str:
    return f"{index}.txt"


def plan_rotation(indices: Iterable[int]) -> list[tuple[int, int]]:
    """
    Build the rename plan that makes room for a new message at index 0.

    Each index ``i`` moves to ``i + 1``. The plan is ordered highest index
    first, so every rename targets a name that has already been vacated.
    """
    return [(i, i + 1) for i in sorted(set(indices), reverse=True)]


class MessageLedger:
    """Appends messages to the rotating history, one writer at a time."""

    def __init__(self, store: DirectoryStore) -> None:
        self._store = store
        self._dir = store.received_messages_dir
        # Guards the whole list -> plan -> rename -> write sequence
        self._lock = threading.Lock()

    def _path(self, index: int) -> Path:
        return self._dir / message_filename(index)

    def indices(self) -> list[int]:
        """Occupied message indices, ascending."""
        found = []
        for entry in self._store.list_entries(self._dir):
            if not entry.is_file:
                continue
            match = MESSAGE_NAME_RE.match(entry.name)
            if match:
                found.append(int(match.group(1)))
        return sorted(found)

    def count(self) -> int:
        return len(self.indices())

    def read(self, index: int) -> str:
        """Return the message currently at ``index`` (0 is the newest)."""
        return self._store.read(self._path(index)).decode(MESSAGE_ENCODING)

    def submit(self, text: str) -> int:
        """
        Store ``text`` as the newest message and return the message count.

        The caller is responsible for rejecting empty text. An OSError from
        a rename leaves the history partially shifted; no rollback is done.
        """
        with self._lock:
            indices = self.indices()
            for src, dst in plan_rotation(indices):
                self._store.rename(self._path(src), self._path(dst), replace=False)
            self._store.write(self._path(0), text.encode(MESSAGE_ENCODING))
            count = len(indices) + 1

        logger.info(f"New text message: {self._path(0)} ({count} stored)")
        return count
