"""
Logging setup for sec-filing-store.

Every module logs through a child of the ``sec_filing_store`` logger,
which owns a single handler: a RichHandler when stdout is a terminal,
otherwise a plain timestamped ``StreamHandler`` on stderr (cron jobs,
containers, CI).

Configuration:
    LOG_LEVEL selects the level by name (DEBUG, INFO, WARNING, ERROR,
    CRITICAL). Unknown names fall back to INFO.

Usage:
    from sec_filing_store.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Tracked %s", url)
"""

import logging
import os
import sys
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "sec_filing_store"

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
PLAIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Azure SDK request logging, uvicorn access lines and HTTP client chatter.
NOISY_LOGGERS = (
    "azure",
    "azure.core.pipeline.policies.http_logging_policy",
    "httpx",
    "httpcore",
    "urllib3",
    "uvicorn.access",
)

_logging_configured = False


def resolve_level(level: Union[int, str, None] = None) -> int:
    """
    Turn a level name or number into a ``logging`` constant.

    ``None`` reads LOG_LEVEL from the environment. Names are
    case-insensitive; anything unrecognised becomes INFO.
    """
    if isinstance(level, int):
        return level
    name = (level if level is not None else os.environ.get("LOG_LEVEL", "INFO")).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _make_handler(level: int, use_rich: bool) -> logging.Handler:
    handler: logging.Handler
    if use_rich and sys.stdout.isatty():
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT))
    handler.setLevel(level)
    return handler


def configure_logging(
    level: Union[int, str, None] = None,
    use_rich: bool = True,
) -> None:
    """
    Install the package handler.

    Runs once per process (CLI callback or API startup); later calls are
    no-ops, use ``set_log_level`` to change the level afterwards.

    Args:
        level: Level constant or name. None reads LOG_LEVEL.
        use_rich: Allow the Rich handler when stdout is a terminal.
    """
    global _logging_configured

    if _logging_configured:
        return

    log_level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(_make_handler(log_level, use_rich))
    # Our handler is the only one; the root logger must not repeat records.
    logger.propagate = False

    _logging_configured = True


def set_log_level(level: Union[int, str]) -> None:
    """Change the level of the package logger and its handlers after setup."""
    log_level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module, always inside the package namespace.

    Configures logging with defaults on first use, so library callers
    that never run the CLI still get output.

    Args:
        name: Usually ``__name__``. Names outside the package are prefixed.
    """
    if not _logging_configured:
        configure_logging()

    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def suppress_third_party_loggers() -> None:
    """Raise every logger in ``NOISY_LOGGERS`` to WARNING."""
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
