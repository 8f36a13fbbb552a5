"""Centralized logging configuration."""

import logging

from config import settings

# Loggers that report preference writes.
PREFERENCE_LOGGERS = ("models.has_preferences",)


def setup_logging() -> None:
    """Configure logging for the application.

    Sets root logger level from settings.LOG_LEVEL, the preference write
    log from settings.PREFERENCE_LOG_LEVEL, and suppresses noisy
    third-party loggers to WARNING.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, settings.LOG_LEVEL),
        force=True,
    )

    for name in PREFERENCE_LOGGERS:
        logging.getLogger(name).setLevel(getattr(logging, settings.PREFERENCE_LOG_LEVEL))

    # SQL echo would print stored preference values
    for name in (
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "httpx",
        "httpcore",
        "uvicorn.access",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)
