"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import structlog

from .config import ConfigLocator

_LOGGING_INITIALISED = False
LOG_FILENAME = "enshunter.log"


def _default_log_dir() -> Path:
    return ConfigLocator().logs_dir


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return the application logger.

    The console handler stays at WARNING unless ``verbose`` so that JSON lines
    do not tear through the progress bar; the file handler always records INFO.
    """

    global _LOGGING_INITIALISED
    if not _LOGGING_INITIALISED:
        log_dir = log_dir or _default_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        console_level = "DEBUG" if verbose else "WARNING"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": console_level,
                        "formatter": "plain",
                    },
                    "scan_file": {
                        "class": "logging.FileHandler",
                        "level": "INFO",
                        "filename": str(log_dir / LOG_FILENAME),
                        "encoding": "utf-8",
                        "formatter": "plain",
                    },
                },
                "loggers": {
                    "enshunter": {
                        "handlers": ["console", "scan_file"],
                        "level": "DEBUG" if verbose else "INFO",
                        "propagate": False,
                    },
                },
            }
        )

        # Forward structlog events to stdlib; JSON rendering happens in the handler
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("enshunter")


__all__ = ["LOG_FILENAME", "configure_logging"]
