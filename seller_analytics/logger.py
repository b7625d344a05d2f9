import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from . import settings

LOG_FILENAME = "seller_analytics.log"
CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(level: Union[int, str, None]) -> int:
    """Accepts 10, "debug" or "DEBUG"; unknown names and None fall back to INFO."""
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: Optional[str] = "seller_analytics",
    log_level: Union[int, str, None] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Attaches a console handler and a rotating file handler (5 MB x 3) to the
    named logger. Calling it again only updates the level, so handlers are
    never stacked. Modules log through logging.getLogger(__name__), which
    propagates up to this logger.
    """
    level = resolve_log_level(log_level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = settings.LOG_DIR / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    file_handler.setLevel(level)
    logger.addHandler(file_handler)

    return logger
