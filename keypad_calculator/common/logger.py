"""Shared logger for the calculator packages."""
import logging
import sys

LOGGER_NAME = "keypad_calculator"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Return the named logger, attaching a stderr handler on first use.

    :param str name: Logger name

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.setLevel(logging.WARNING)
    return log


def set_level(level: str) -> None:
    """Set the level of the shared logger (e.g. "INFO", "DEBUG")."""
    logger.setLevel(level.upper())


logger = get_logger()
