"""JSON logging for the escrow service."""
from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Chatty third-party loggers kept at WARNING unless the service runs at DEBUG.
NOISY_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration", "uvicorn.access")


def setup_logging(level: str = "INFO", *, service: str = "forge-escrow") -> None:
    """Route every log record through one stdout handler emitting JSON lines."""

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            LOG_FORMAT,
            rename_fields={"levelname": "level", "name": "logger"},
            static_fields={"service": service},
        )
    )
    root_logger.addHandler(handler)

    quiet_level = logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


__all__ = ["setup_logging", "get_logger", "LOG_FORMAT"]
