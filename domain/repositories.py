from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .models import EmojiCollection


class CollectionRepository(Protocol):
    """
    Abstraction over the per-user emoji tallies.

    Implementations are responsible for:
    - Keeping the first-seen order of every emoji a user has rolled.
    - Serializing concurrent updates to the same user so no increment
      is lost.
    """

    def merge(self, user_key: str, emojis: Iterable[str]) -> None:
        """
        Add one of each given emoji to the user's collection.

        Emojis are applied in the given order; new ones are appended after
        everything the user already owns. Implementations must apply the
        whole batch atomically with respect to other calls for the same user.
        """

        ...

    def get(self, user_key: str) -> Optional[EmojiCollection]:
        """Return a snapshot of the user's collection, or None if they never rolled."""

        ...

    def close(self) -> None:
        """Stop accepting updates."""

        ...
