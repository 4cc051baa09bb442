"""Logging setup for the ID card OCR service.

All modules log through the root handler installed here, so the API,
the CLI, and the OCR pipeline share one format.
"""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output with per-chunk decoder noise.
_NOISY_LOGGERS = ("PIL", "multipart")


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure the root logger with the service format.

    Calling this more than once is a no-op once a handler is installed.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        stream: Output stream for the handler. Defaults to stdout.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
