"""Logging setup. Library modules just ``from loguru import logger``."""

import sys
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - {message}"
)


def configure_logging(level: str = "INFO", sink: Any = sys.stderr) -> int:
    """Replace loguru's default handler with one at ``level``.

    Returns:
        The id of the added handler.
    """
    logger.remove()
    return logger.add(sink, level=level.upper(), format=LOG_FORMAT)
