"""
Logging setup for isbnkit.

Console handler on the ``isbnkit`` logger, JSON lines (python-json-logger)
by default or a plain text format for local debugging.
"""

import logging

from pythonjsonlogger import jsonlogger

LOGGER_NAME = 'isbnkit'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'


def setup_logging(log_level: str = "INFO", json_output: bool = True, stream=None) -> logging.Logger:
    """Configure the package logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_output: JSON lines when True, plain text otherwise
        stream: Target stream (stderr by default)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(getattr(logging, log_level.upper()))

    handler = logging.StreamHandler(stream)
    if json_output:
        formatter = jsonlogger.JsonFormatter(JSON_FORMAT, rename_fields={'levelname': 'level'})
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.debug("Logging configured (level=%s, json=%s)", log_level, json_output)
    return logger
