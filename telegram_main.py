import logging

import telebot

from config import configure_logging, load_settings
from infrastructure.files.emoji_pool_file import load_emoji_pool
from infrastructure.memory.collection_repository_memory import InMemoryCollectionRepository
from interfaces.telegram.handlers import create_telegram_bot


logger = logging.getLogger("telegram_main")


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN environment variable is not set.")

    pool = load_emoji_pool(settings.emoji_file)
    # Lets "/roll@otherbot" in group chats be told apart from our own commands.
    bot_username = telebot.TeleBot(settings.telegram_bot_token, threaded=False).get_me().username

    with InMemoryCollectionRepository() as collection_repo:
        bot = create_telegram_bot(
            settings.telegram_bot_token,
            pool,
            collection_repo,
            bot_username=bot_username,
            num_threads=settings.telegram_num_threads,
        )
        logger.info("Telegram bot @%s is polling for messages", bot_username)
        bot.infinity_polling()


if __name__ == "__main__":
    main()
