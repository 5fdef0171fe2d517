"""Logging configuration for the application."""

import logging
import sys
from typing import Optional

ACCESS_LOGGER = "task_api.access"

_FORMAT = "%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s"


def setup_logging(
    log_level: str = "info",
    log_file: Optional[str] = None,
    access_log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure logging for the application."""
    formatter = logging.Formatter(fmt=_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Access lines go to their own file when configured, and still reach root.
    access_logger = logging.getLogger(ACCESS_LOGGER)
    for handler in access_logger.handlers[:]:
        access_logger.removeHandler(handler)
        handler.close()
    if access_log_file:
        access_handler = logging.FileHandler(access_log_file)
        access_handler.setFormatter(formatter)
        access_logger.addHandler(access_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module."""
    return logging.getLogger(name)
