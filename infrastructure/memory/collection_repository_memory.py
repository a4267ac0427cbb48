from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Optional

from domain.models import EmojiCollection
from domain.repositories import CollectionRepository


logger = logging.getLogger(__name__)


class CollectionStoreClosedError(RuntimeError):
    """Raised when a roll is merged into a store that has been closed."""


class _UserEntry:
    """One user's tally. Plain dicts keep insertion order, which is first-seen order."""

    __slots__ = ("lock", "counts")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.counts: Dict[str, int] = {}


class InMemoryCollectionRepository(CollectionRepository):
    """
    Process-local implementation of `CollectionRepository`.

    Entries are created lazily on a user's first merge and live until the
    process exits. A store-wide lock only guards entry creation; each
    entry carries its own lock that is held across the full
    read-modify-write of a merge, so rolls for different users do not
    wait on each other.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _UserEntry] = {}
        self._entries_lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> "InMemoryCollectionRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        with self._entries_lock:
            return self._closed

    def _get_or_create_entry(self, user_key: str) -> _UserEntry:
        with self._entries_lock:
            if self._closed:
                raise CollectionStoreClosedError("Collection store is closed.")
            entry = self._entries.get(user_key)
            if entry is None:
                entry = _UserEntry()
                self._entries[user_key] = entry
            return entry

    def merge(self, user_key: str, emojis: Iterable[str]) -> None:
        batch = list(emojis)
        entry = self._get_or_create_entry(user_key)
        with entry.lock:
            for emoji in batch:
                entry.counts[emoji] = entry.counts.get(emoji, 0) + 1

    def get(self, user_key: str) -> Optional[EmojiCollection]:
        with self._entries_lock:
            entry = self._entries.get(user_key)
        if entry is None:
            return None

        with entry.lock:
            return EmojiCollection(tuple(entry.counts.items()))

    def user_count(self) -> int:
        with self._entries_lock:
            return len(self._entries)

    def close(self) -> None:
        with self._entries_lock:
            if self._closed:
                return
            self._closed = True
            user_count = len(self._entries)
        logger.info("Collection store closed with %d users.", user_count)
