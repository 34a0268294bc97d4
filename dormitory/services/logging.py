"""Logging setup for the billing API.

Records go to stdout and to a size-rotated log file. The level comes from the
LOG_LEVEL environment variable, falling back to the ``log_level`` setting.
Use WARNING in production and DEBUG while reconciling bills by hand.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dormitory.config import settings

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3


def get_log_level() -> int:
    """Resolve the configured level name.

    Returns:
        Logging level constant; unknown names resolve to INFO
    """
    level = logging.getLevelName(os.getenv("LOG_LEVEL", settings.log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_server_logging(log_file: str | None = None) -> None:
    """
    Route every logger to stdout and a rotating file.

    Args:
        log_file: Path to log file (default: settings.log_file)

    Root handlers are replaced, so calling this more than once does not
    duplicate output.
    """
    log_path = Path(log_file or settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    level = get_log_level()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            log_path, maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # SQL echo is governed by DATABASE_ECHO, not by the root level
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))
