"""
Logger factory for FlowQ modules.

Every module calls get_logger(__name__). The first call attaches one stream
handler to the root logger; the level comes from FLOWQ_LOG_LEVEL, read
through the .env-aware loader so a level set in .env applies no matter which
module imports logging first.
"""

from __future__ import annotations

import logging
from typing import Final

from flowq.infrastructure.env import get_optional_env

LOG_LEVEL_ENV: Final[str] = "FLOWQ_LOG_LEVEL"
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

_handler: logging.Handler | None = None


def resolve_log_level(value: str | None = None) -> int:
    """Map a level name ("debug", "WARNING", ...) to a logging level; unknown names give INFO."""
    name = (value if value is not None else get_optional_env(LOG_LEVEL_ENV, "INFO")).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; the flowq stream handler is attached on first use."""
    global _handler

    level = resolve_log_level()
    root = logging.getLogger()

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(_handler)
    root.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
