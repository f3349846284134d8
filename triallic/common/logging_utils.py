"""
Logging utilities for consistent logging setup across the application.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(logger: logging.Logger, log_level: int) -> logging.Logger:
    """
    Set up a logger with a StreamHandler and standard formatter.

    Calling it again on the same logger only updates the level, so server and
    client instances created in one process share a single handler.

    Args:
        logger: The logger instance to configure
        log_level: The logging level to set

    Returns:
        The configured logger
    """
    logger.setLevel(log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    return logger
