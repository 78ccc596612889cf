"""
Logging configuration for pagerunner.

This module provides centralized logging configuration with:
- Console output on stderr (stdout is reserved for action reports)
- Optional file output
- Per-module loggers
"""

import logging
import sys
from pathlib import Path
from typing import Optional


DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file
        console: Whether to log to stderr (default: True)

    Returns:
        Configured root logger

    Example:
        >>> logger = setup_logging(level="DEBUG")
        >>> logger.debug("Dispatcher starting")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(exist_ok=True, parents=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug(f"Logging initialized - Level: {level}, File: {log_file or 'none'}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Name of the logger (typically __name__)

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(name)


def init_cli_logging(verbose: bool = False, log_file: Optional[str] = None,
                     level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """
    Initialize logging for the command-line entry point.

    Args:
        verbose: If True, force DEBUG level
        log_file: Optional log file path
        level: Level used when not verbose

    Returns:
        Configured logger
    """
    return setup_logging(level="DEBUG" if verbose else level, log_file=log_file)
