from __future__ import annotations

import logging

import discord
from discord.ext import commands

from application.services import ExternalContext, roll_emojis, show_emojis
from domain.models import EmojiPool
from domain.repositories import CollectionRepository


logger = logging.getLogger(__name__)


def _build_external_context(user: discord.abc.User) -> ExternalContext:
    """Create an `ExternalContext` from a Discord user."""

    return ExternalContext(provider="discord", provider_user_id=str(user.id))


def create_discord_bot(
    pool: EmojiPool,
    collection_repo: CollectionRepository,
) -> commands.Bot:
    """
    Configure and return a Discord bot with behaviour analogous to
    the Telegram interface: !roll and !emojis.
    """

    intents = discord.Intents.default()
    intents.message_content = True

    bot = commands.Bot(
        command_prefix="!",
        intents=intents,
        help_command=None,
        case_insensitive=True,
    )

    @bot.event
    async def on_ready():
        logger.info("Discord bot logged in as %s (id=%s)", bot.user, bot.user.id)

    @bot.event
    async def on_command_error(ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CommandNotFound):
            logger.info("Ignoring unknown command from %s: %r", ctx.author.id, ctx.message.content)
            return
        logger.error("Command %r failed", ctx.message.content, exc_info=error)

    @bot.command(name="roll")
    async def roll_cmd(ctx: commands.Context):
        logger.info("<%s>: %s", ctx.author.id, ctx.message.content)
        result = roll_emojis(_build_external_context(ctx.author), pool, collection_repo)
        await ctx.send(result.text)

    @bot.command(name="emojis")
    async def emojis_cmd(ctx: commands.Context):
        logger.info("<%s>: %s", ctx.author.id, ctx.message.content)
        text = show_emojis(
            _build_external_context(ctx.author), collection_repo, prefix="!"
        )
        await ctx.send(text)

    return bot
