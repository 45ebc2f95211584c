import logging
import os
from typing import Any, Dict

from rich.logging import RichHandler

LOG_LEVELS = ["debug", "info", "warning", "error"]
LOGGER_NAME = "catalogkit"


def init_logger(level: str):
    global logger

    if level.lower() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: '{level}'. Available: {', '.join(LOG_LEVELS)}")
    level = level.upper()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.setLevel(level)
    logger.addHandler(
        RichHandler(level=level, show_level=False, show_path=False, show_time=False)
    )
    logger.propagate = False


logger = logging.getLogger(LOGGER_NAME)
init_logger(os.getenv("CATALOGKIT_LOG_LEVEL", "INFO"))


def log_info(msg: str, pretty: bool = True):
    extras: Dict[str, Any] = {"markup": pretty}
    if not pretty:
        extras["highlighter"] = None
    logger.info(msg, extra=extras)


def log_debug(msg: str, pretty: bool = True):
    extras: Dict[str, Any] = {"markup": pretty}
    if not pretty:
        extras["highlighter"] = None
    logger.debug(msg, extra=extras)

