"""Application-wide logging setup."""

import logging

LOG_FORMAT_DEBUG = "%(levelname)s:%(message)s:%(pathname)s:%(funcName)s:%(lineno)d"
LOG_FORMAT_STANDARD = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(log_level: str = "INFO") -> str:
    """Configure root logging and return the level actually applied."""
    log_level = str(log_level).upper()
    if log_level not in VALID_LEVELS:
        log_level = "INFO"

    level = getattr(logging, log_level, logging.INFO)
    log_format = LOG_FORMAT_DEBUG if log_level == "DEBUG" else LOG_FORMAT_STANDARD
    logging.basicConfig(level=level, format=log_format, force=True)

    logging.getLogger(__name__).info("Logging configured with level: %s", log_level)
    return log_level


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name"""
    return logging.getLogger(name)
