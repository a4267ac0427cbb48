from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: Optional[str]
    discord_token: Optional[str]
    emoji_file: str = "emojis.csv"
    log_level: str = "INFO"
    telegram_num_threads: int = 2


def int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s=%s. Falling back to %s.", name, raw, default)
        return default


def _str_from_env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def load_settings() -> Settings:
    """Read settings from the environment, after loading any `.env` file."""

    load_dotenv()

    return Settings(
        telegram_bot_token=_str_from_env("TELEGRAM_BOT_TOKEN"),
        discord_token=_str_from_env("DISCORD_TOKEN"),
        emoji_file=_str_from_env("EMOJI_FILE") or "emojis.csv",
        log_level=(_str_from_env("LOG_LEVEL") or "INFO").upper(),
        telegram_num_threads=max(1, int_from_env("TELEGRAM_NUM_THREADS", 2)),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
