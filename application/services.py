from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TypeVar

from domain.models import Command, EmojiCollection, EmojiPool
from domain.repositories import CollectionRepository


logger = logging.getLogger(__name__)

ROLL_SIZE = 5
LINE_SEPARATOR = "   "
NO_EMOJIS_TEXT = "You still have no emojis! Type {prefix}roll to get some!"

_COMMANDS = {
    "roll": Command.ROLL,
    "emojis": Command.EMOJIS,
}

T = TypeVar("T")


@dataclass
class ExternalContext:
    """
    Information about the caller from a particular channel (Telegram, Discord).

    The application layer never depends on concrete SDK types; it only sees
    this small context object.
    """

    provider: str
    provider_user_id: str

    @property
    def user_key(self) -> str:
        """Key of the caller's collection, scoped by provider."""

        return f"{self.provider}:{self.provider_user_id}"


@dataclass
class RollResult:
    """Emojis drawn by a roll (in draw order) and the reply to send."""

    emojis: Tuple[str, ...]
    text: str


def latest_first(items: Sequence[T]) -> List[T]:
    """Order used whenever emojis are shown: most recent first."""

    return list(reversed(items))


def parse_command(
    text: Optional[str],
    prefix: str = "/",
    bot_username: Optional[str] = None,
) -> Command:
    """
    Classify inbound text.

    Only the first word counts, so "/roll please" is still a roll. A
    Telegram style "@botname" suffix is accepted unless it names a
    different bot. The name must follow the prefix directly, so "/ roll"
    is not a roll. Never raises.
    """

    if not text or not text.startswith(prefix):
        return Command.NOT_A_COMMAND

    rest = text[len(prefix):]
    if not rest or rest[0].isspace():
        return Command.UNRECOGNIZED

    words = rest.split()

    name, _, addressee = words[0].partition("@")
    if addressee and bot_username and addressee.lower() != bot_username.lower():
        return Command.UNRECOGNIZED

    return _COMMANDS.get(name.lower(), Command.UNRECOGNIZED)


def render_collection(collection: EmojiCollection) -> str:
    """
    Render a collection as one run of repeated glyphs per emoji.

    e.g. [("a", 2), ("b", 1)] -> "b   aa   "
    """

    return "".join(
        emoji * quantity + LINE_SEPARATOR
        for emoji, quantity in latest_first(collection.items)
    )


def roll_emojis(
    external_ctx: ExternalContext,
    pool: EmojiPool,
    collection_repo: CollectionRepository,
    count: int = ROLL_SIZE,
) -> RollResult:
    """
    Handle a roll:
    - Draw `count` distinct emojis from the pool.
    - Add them to the caller's collection.
    - Report them back, most recent draw first.
    """

    rolled = pool.sample(count)
    if len(rolled) < count:
        logger.warning(
            "Pool only had %d distinct emojis for a roll of %d.", len(rolled), count
        )

    collection_repo.merge(external_ctx.user_key, rolled)
    logger.debug("%s rolled %s", external_ctx.user_key, "".join(rolled))

    text = "You have rolled: " + "".join(latest_first(rolled))
    return RollResult(emojis=rolled, text=text)


def show_emojis(
    external_ctx: ExternalContext,
    collection_repo: CollectionRepository,
    prefix: str = "/",
) -> str:
    """Describe everything the caller has rolled so far."""

    collection = collection_repo.get(external_ctx.user_key)
    if collection is None:
        return NO_EMOJIS_TEXT.format(prefix=prefix)

    return "Your emojis:\n\n" + render_collection(collection)


def handle_text(
    external_ctx: ExternalContext,
    text: Optional[str],
    pool: EmojiPool,
    collection_repo: CollectionRepository,
    prefix: str = "/",
    bot_username: Optional[str] = None,
) -> Optional[str]:
    """
    Dispatch a chat message to the matching command.

    Returns the reply text, or None when nothing should be sent.
    Unknown commands are ignored rather than treated as errors.
    """

    command = parse_command(text, prefix=prefix, bot_username=bot_username)

    if command is Command.ROLL:
        return roll_emojis(external_ctx, pool, collection_repo).text
    if command is Command.EMOJIS:
        return show_emojis(external_ctx, collection_repo, prefix=prefix)
    if command is Command.UNRECOGNIZED:
        logger.info("Ignoring unknown command from %s: %r", external_ctx.user_key, text)
    return None
