import logging

from config import configure_logging, load_settings
from infrastructure.files.emoji_pool_file import load_emoji_pool
from infrastructure.memory.collection_repository_memory import InMemoryCollectionRepository
from interfaces.discord.handlers import create_discord_bot


logger = logging.getLogger("discord_main")


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.discord_token:
        raise RuntimeError("DISCORD_TOKEN environment variable is not set.")

    pool = load_emoji_pool(settings.emoji_file)

    with InMemoryCollectionRepository() as collection_repo:
        bot = create_discord_bot(pool, collection_repo)
        logger.info("Starting Discord bot with %d emojis in the pool", len(pool))
        bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
