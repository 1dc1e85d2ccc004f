"""
Logging configuration and setup.

Everything logs under the ``odysseus`` namespace to a coloured console and,
optionally, a plain-text file. discord.py's own ``discord`` logger is routed
through the same handlers, since the bot starts with ``log_handler=None``.
"""

import logging
import sys
from pathlib import Path

from odysseus.config.settings import Settings

ROOT_LOGGER = "odysseus"
DISCORD_LOGGER = "discord"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps the level name in an ANSI colour."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.COLORS.get(plain)
        if color:
            record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Handlers share the record; the file handler must see it uncoloured
            record.levelname = plain


def _build_handlers(settings: Settings) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    return handlers


def setup_logging(settings: Settings) -> None:
    """
    Configure the ``odysseus`` and ``discord`` loggers from settings.

    The gateway client is chatty at INFO, so discord.py never logs below
    WARNING unless the configured level is DEBUG.

    Args:
        settings: Application settings containing log configuration
    """
    level = getattr(logging, settings.log_level)
    handlers = _build_handlers(settings)

    discord_level = logging.DEBUG if level == logging.DEBUG else max(level, logging.WARNING)
    for name, logger_level in ((ROOT_LOGGER, level), (DISCORD_LOGGER, discord_level)):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logger_level)
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.info(f"Logging initialized - Level: {settings.log_level}")
    if settings.log_file:
        root_logger.info(f"Logging to file: {settings.log_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``odysseus`` namespace.

    Args:
        name: Logger name (typically __name__)
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
