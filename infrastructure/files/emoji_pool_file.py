from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from domain.models import EmojiPool


logger = logging.getLogger(__name__)


class EmojiPoolLoadError(RuntimeError):
    """Raised when the emoji pool file cannot be turned into a usable pool."""


def parse_emoji_lines(text: str) -> List[str]:
    """
    Split newline-delimited file contents into emoji tokens.

    Trailing whitespace (including Windows line endings) is dropped from
    every line and blank lines are skipped.
    """

    return [line.rstrip() for line in text.strip().split("\n") if line.strip()]


def load_emoji_pool(path: Union[str, Path]) -> EmojiPool:
    """
    Read the emoji pool from a newline-delimited file.

    The bot cannot run without a pool, so any failure here is raised as
    `EmojiPoolLoadError` and is expected to abort startup.
    """

    pool_path = Path(path)
    try:
        text = pool_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EmojiPoolLoadError(f"Could not read emoji file {pool_path}: {exc}") from exc

    emojis = parse_emoji_lines(text)
    if not emojis:
        raise EmojiPoolLoadError(f"Emoji file {pool_path} is empty.")

    pool = EmojiPool(tuple(emojis))
    logger.info(
        "Loaded %d emojis (%d distinct) from %s",
        len(pool),
        pool.distinct_count,
        pool_path,
    )
    return pool
