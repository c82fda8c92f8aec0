"""Logging configuration for propertyops (stdlib logging, stdout)."""

import logging
import sys

from propertyops.core.config import get_settings

# Per-request/per-query chatter that drowns workflow logs at DEBUG.
_NOISY_LOGGERS = ("sqlalchemy.engine", "asyncpg", "httpx")


def setup_logging() -> None:
    """Configure process-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO. Skipped
    workflow rules and notification bodies are only logged at DEBUG.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.database_echo:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
