"""Logging setup shared by the web app and the CLI."""

import logging
import sys
from typing import Optional

from ..config import get_config

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers kept at WARNING unless running at debug level
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "MARKDOWN", "multipart")


def setup_logging(level_name: Optional[str] = None) -> None:
    """
    Configure the root logger.

    ``level_name`` overrides ``config.logging.level`` (the CLI passes
    ``debug`` for ``--verbose``).
    """
    level_name = (level_name or get_config().logging.level).lower()
    level = LEVELS.get(level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("uvicorn").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(level)

    third_party_level = logging.DEBUG if level_name == "debug" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logging.getLogger(__name__).debug(f"Logging configured at level: {level_name}")
