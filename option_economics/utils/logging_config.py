"""Logging configuration for the option economics engine.

All loggers live under the ``option_economics`` namespace so a single
call to :func:`setup_logging` controls the whole package.
"""

import logging
import sys
from typing import Optional
from pathlib import Path

ROOT_LOGGER_NAME = "option_economics"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """Configure logging for the calculator.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, logs only to console.
        log_format: Optional custom log format string

    Returns:
        Configured package logger

    Raises:
        ValueError: If log_level is not a known logging level name

    Example:
        >>> logger = setup_logging(log_level="DEBUG", log_file="logs/calculator.log")
        >>> logger.info("Comparing %s call against stock", "AAPL")
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Re-running setup must not stack handlers
    logger.handlers.clear()

    if log_format is None:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'

    formatter = logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger inside the package namespace.

    Args:
        name: Optional child name. If None, returns the package logger.

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger("payoff")
        >>> logger.debug("Sampling %d prices", 51)
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
