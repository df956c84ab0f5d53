"""Logging setup for the application."""

import logging
import sys

APP_LOGGER_NAME = "timebank_portal"


def setup_logger(log_level: str = "INFO", name: str = APP_LOGGER_NAME) -> logging.Logger:
    """
    Set up and configure application logger.

    Creates a logger with a simple, readable format that works for both
    the API server output and the operator CLI. Module loggers
    (logging.getLogger(__name__)) follow the root level set here.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: timebank_portal)

    Returns:
        logging.Logger: Configured logger instance
    """
    # Convert string to logging level
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # supabase-py logs every PostgREST request through httpx at INFO
    for noisy in ("httpx", "httpcore", "hpack"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))

    logger = logging.getLogger(name)
    if name == APP_LOGGER_NAME:
        logger.setLevel(numeric_level)
    else:
        # Other names inherit from root so a later LOG_LEVEL change reaches them
        logger.setLevel(logging.NOTSET)

    return logger
