from __future__ import annotations

import logging
from typing import Optional

import telebot

from application.services import ExternalContext, handle_text
from domain.models import EmojiPool
from domain.repositories import CollectionRepository


logger = logging.getLogger(__name__)


class LoggingExceptionHandler(telebot.ExceptionHandler):
    """
    Report failures raised while handling an update.

    Marking the exception as handled keeps polling alive, so a reply that
    fails to send only loses that one reply. Nothing is retried.
    """

    def handle(self, exception) -> bool:
        logger.error(
            "Failed to handle Telegram update: %s",
            exception,
            exc_info=(type(exception), exception, exception.__traceback__),
        )
        return True


def _build_external_context(message) -> ExternalContext:
    """Extract a channel-agnostic context object from a Telegram message."""

    return ExternalContext(
        provider="telegram",
        provider_user_id=str(message.from_user.id),
    )


def create_telegram_bot(
    bot_token: str,
    pool: EmojiPool,
    collection_repo: CollectionRepository,
    bot_username: Optional[str] = None,
    num_threads: int = 2,
) -> telebot.TeleBot:
    """
    Configure and return a TeleBot instance wired to the application layer.

    Handlers run on TeleBot's worker threads, so several messages can be
    in flight at once; the collection repository is the only state they
    share. This module contains only Telegram-specific concerns.
    """

    bot = telebot.TeleBot(
        bot_token,
        threaded=True,
        num_threads=num_threads,
        exception_handler=LoggingExceptionHandler(),
    )

    @bot.message_handler(content_types=["text"])
    def handle_message(message):
        logger.info("<%s>: %s", message.from_user.id, message.text)

        reply = handle_text(
            _build_external_context(message),
            message.text,
            pool,
            collection_repo,
            prefix="/",
            bot_username=bot_username,
        )
        if reply is None:
            return

        bot.send_message(message.chat.id, reply)

    return bot
