"""Logging setup for test sessions that use the fixtures."""

import logging
from typing import Optional

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO", uvicorn_level: Optional[str] = None) -> None:
    """Configure root logging once and align uvicorn's loggers.

    ``uvicorn_level`` defaults to ``level``. Calling this again only adjusts
    levels; handlers installed by an earlier call (or by pytest) are kept.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(level.upper())
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel((uvicorn_level or level).upper())
