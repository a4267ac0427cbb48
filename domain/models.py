from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence, Tuple


@dataclass(frozen=True)
class EmojiPool:
    """
    The fixed set of emojis that rolls are drawn from.

    Loaded once at startup. Duplicate tokens are allowed and make the
    duplicated emoji proportionally more likely to be drawn.
    """

    emojis: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.emojis:
            raise ValueError("Emoji pool must contain at least one emoji.")

    def __len__(self) -> int:
        return len(self.emojis)

    def __iter__(self) -> Iterator[str]:
        return iter(self.emojis)

    @property
    def distinct_count(self) -> int:
        return len(set(self.emojis))

    def sample(self, n: int) -> Tuple[str, ...]:
        """
        Draw up to `n` distinct emojis without replacement.

        Pool positions are shuffled with a fresh OS-entropy generator on
        every call, so draws cannot be replayed from a known seed. When the
        pool holds fewer than `n` distinct emojis, all of them are returned.
        The result is in selection order.
        """

        if n < 0:
            raise ValueError("Sample size must not be negative.")

        rng = random.SystemRandom()
        positions = rng.sample(range(len(self.emojis)), len(self.emojis))

        picked = []
        seen = set()
        for position in positions:
            if len(picked) == n:
                break
            emoji = self.emojis[position]
            if emoji in seen:
                continue
            seen.add(emoji)
            picked.append(emoji)
        return tuple(picked)


@dataclass(frozen=True)
class EmojiCollection:
    """
    Read-only snapshot of everything a single user has rolled.

    `items` holds (emoji, quantity) pairs in the order each emoji was
    first rolled by the user.
    """

    items: Tuple[Tuple[str, int], ...]

    def __len__(self) -> int:
        return len(self.items)

    @property
    def total(self) -> int:
        return sum(quantity for _, quantity in self.items)

    def quantity_of(self, emoji: str) -> int:
        for item, quantity in self.items:
            if item == emoji:
                return quantity
        return 0

    @property
    def emojis(self) -> Sequence[str]:
        return [emoji for emoji, _ in self.items]


class Command(Enum):
    """Classification of an inbound chat message."""

    ROLL = "roll"
    EMOJIS = "emojis"
    UNRECOGNIZED = "unrecognized"
    NOT_A_COMMAND = "not_a_command"
