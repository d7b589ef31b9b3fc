"""Logging setup for the natural selection API server."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Loggers that follow NATSEL_LOG_LEVEL along with the root logger
_SERVICE_LOGGERS = ("natural_selection", "backend", "uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_log_level(level: str | None = None) -> str:
    """Return the level name to use: explicit, then ``NATSEL_LOG_LEVEL``, then INFO."""
    raw_level = level if level is not None else os.getenv("NATSEL_LOG_LEVEL")
    return (raw_level or "INFO").upper()


def configure_logging(level: str | None = None) -> logging.Logger:
    """Configure logging for the engine, the backend and uvicorn.

    Returns:
        The backend logger (``backend``).
    """
    resolved_level = resolve_log_level(level)
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT)
    for name in _SERVICE_LOGGERS:
        logging.getLogger(name).setLevel(resolved_level)

    app_logger = logging.getLogger("backend")
    app_logger.debug("Logging configured at %s", resolved_level)
    return app_logger
